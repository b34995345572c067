"""Core data models shared by the audit parsing stages."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Field:
    """A single key/value pair extracted from a message body.

    ``orig`` is the token exactly as it appeared in the message (quotes
    included) and never changes. ``value`` is the current, possibly enriched,
    value.
    """

    orig: str
    value: str

    @classmethod
    def plain(cls, value: str) -> Field:
        """Field whose original text and value are the same string."""
        return cls(orig=value, value=value)

    def with_value(self, value: str) -> Field:
        """Return a copy carrying a new value and the same original text."""
        return replace(self, value=value)


FieldStore: TypeAlias = dict[str, Field]


def flatten(store: FieldStore, out: dict[str, str]) -> dict[str, str]:
    """Copy each field's value into ``out`` and return it."""
    for key, f in store.items():
        out[key] = f.value
    return out

"""Key/value extraction from audit message bodies.

Audit bodies are loosely structured ``key=value`` lists. Values may be plain,
single-quoted or double-quoted (with ``\\`` escaping the closing quote), and a
``msg=`` value can itself carry another key/value list. Tokenization never
fails: fragments that are not ``key=value`` are skipped.
"""

from __future__ import annotations

from enum import Enum, auto

from ..models import Field, FieldStore

_PLACEHOLDERS = frozenset({"", "?", "?,", "(null)"})
_QUOTES = ("'", '"')
# \x1c-\x1f are str.isspace() but do not end a plain value.
_NOT_SPACE = frozenset("\x1c\x1d\x1e\x1f")


class _State(Enum):
    SKIP = auto()
    KEY = auto()
    VALUE_BEGIN = auto()
    PLAIN_VALUE = auto()
    QUOTED_VALUE = auto()


def is_key_char(c: str) -> bool:
    """Return True for characters allowed in a field name."""
    return ("a" <= c <= "z") or ("0" <= c <= "9") or c == "_" or c == "-"


def is_space(c: str) -> bool:
    """Return True for whitespace that terminates a plain value."""
    return c.isspace() and c not in _NOT_SPACE


def is_interesting_value(value: str) -> bool:
    """Return False for placeholders auditd writes for absent values."""
    return value not in _PLACEHOLDERS


def save_key_value(key: str, orig: str, value: str, store: FieldStore) -> None:
    """Store one pair, expanding nested ``msg=`` payloads into the same store."""
    if key == "msg":
        extract_key_value_pairs(value, store)
    elif is_interesting_value(value):
        store[key] = Field(orig=orig, value=value)


def extract_key_value_pairs(body: str, store: FieldStore) -> FieldStore:
    """Tokenize ``body`` into ``store`` and return the store."""
    state = _State.SKIP
    key_start = value_start = 0
    key = ""
    quote = ""
    backslash = False

    for i, c in enumerate(body):
        if state is _State.SKIP:
            if is_key_char(c):
                state = _State.KEY
                key_start = i
            continue

        if state is _State.KEY:
            if is_key_char(c):
                continue
            if c != "=":
                state = _State.SKIP
                continue
            key = body[key_start:i]
            state = _State.VALUE_BEGIN
            continue

        if state is _State.VALUE_BEGIN:
            value_start = i
            if c in _QUOTES:
                quote = c
                backslash = False
                state = _State.QUOTED_VALUE
                continue
            # Plain values start on this same character.
            state = _State.PLAIN_VALUE

        if state is _State.PLAIN_VALUE:
            if c not in _QUOTES and not is_space(c):
                continue
            v = body[value_start:i]
            save_key_value(key, v, v, store)
            state = _State.SKIP
            continue

        if state is _State.QUOTED_VALUE:
            if c == quote and not backslash:
                save_key_value(key, body[value_start : i + 1], body[value_start + 1 : i], store)
                state = _State.SKIP
            backslash = c == "\\"

    # An unterminated plain value runs to the end of the body; an unterminated
    # quoted value is dropped.
    if state is _State.PLAIN_VALUE:
        v = body[value_start:]
        save_key_value(key, v, v, store)

    return store

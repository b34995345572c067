"""Extraction of audit rule keys (``-k`` / ``-F key=``) into tags."""

from __future__ import annotations

from ..models import FieldStore
from .hexcodec import decode_uppercase_hex

# auditd joins multiple rule keys with \x01 and hex-encodes the result.
RULE_KEY_SEPARATOR = b"\x01"


def extract_rule_tags(store: FieldStore) -> list[str]:
    """Remove the ``key`` field from ``store`` and return its tags."""
    f = store.pop("key", None)
    if f is None:
        return []

    # Any uppercase hex original is taken as encoded keys, e.g. key=6E6574.
    try:
        decoded = decode_uppercase_hex(f.orig)
    except ValueError:
        pass
    else:
        return [part.decode("utf-8", errors="replace") for part in decoded.split(RULE_KEY_SEPARATOR)]

    # key="net" or key="key=net"
    _, sep, tail = f.value.partition("=")
    return [tail] if sep else [f.value]

"""Hex helpers for audit fields.

auditd hex-encodes any value that contains spaces, quotes or control
characters, so most "interesting" fields may or may not be encoded.
"""

from __future__ import annotations

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_UPPER_HEX_DIGITS = frozenset("0123456789ABCDEF")


def decode_hex_field(orig: str, *, errors: str = "replace") -> str | None:
    """Decode a field's original text if it is hex, else return None.

    Empty and odd-length strings are never treated as hex. NUL bytes (used as
    argument separators, e.g. in ``proctitle``) become spaces.
    """
    if not orig or len(orig) % 2 == 1:
        return None
    if not _HEX_DIGITS.issuperset(orig):
        return None
    raw = bytes.fromhex(orig).replace(b"\x00", b" ")
    return raw.decode("utf-8", errors=errors)


def hex_to_string(value: str, *, errors: str = "replace") -> str:
    """Strictly decode ``value`` as hex, truncating at the first NUL.

    Raises ValueError when ``value`` is not valid hex.
    """
    if len(value) % 2 == 1 or not _HEX_DIGITS.issuperset(value):
        raise ValueError(f"not a hex string: {value!r}")
    raw = bytes.fromhex(value)
    nul = raw.find(b"\x00")
    if nul != -1:
        raw = raw[:nul]
    return raw.decode("utf-8", errors=errors)


def decode_uppercase_hex(value: str) -> bytes:
    """Decode a string made only of uppercase hex digit pairs.

    auditd writes hex-encoded rule keys in uppercase, which distinguishes them
    from ordinary lowercase key names. Raises ValueError otherwise.
    """
    if not value or len(value) % 2 == 1 or not _UPPER_HEX_DIGITS.issuperset(value):
        raise ValueError(f"not an uppercase hex string: {value!r}")
    return bytes.fromhex(value)

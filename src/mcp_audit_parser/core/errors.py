"""Error types raised while parsing and enriching audit messages."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories for a single audit message."""

    INVALID_HEADER = "invalid_header"
    NO_DATA = "no_data"
    PARSE_FAILURE = "parse_failure"
    UNKNOWN_RECORD_TYPE = "unknown_record_type"
    MISSING_FIELD = "missing_field"
    NUMERIC_CONVERSION = "numeric_conversion"
    ADDRESS_DECODE = "address_decode"


_DEFAULT_MESSAGES = {
    ErrorKind.INVALID_HEADER: "invalid audit message header",
    ErrorKind.NO_DATA: "message has no data content",
    ErrorKind.PARSE_FAILURE: "failed to parse audit message",
    ErrorKind.UNKNOWN_RECORD_TYPE: "unknown message type",
    ErrorKind.MISSING_FIELD: "key not found",
    ErrorKind.NUMERIC_CONVERSION: "failed to parse number",
    ErrorKind.ADDRESS_DECODE: "failed to parse saddr",
}


class AuditParseError(ValueError):
    """Raised when an audit message cannot be parsed or enriched.

    ``kind`` identifies the failure category and ``field`` names the audit
    field involved, when there is one. The underlying exception (if any) is
    chained as ``__cause__``.
    """

    def __init__(self, kind: ErrorKind, message: str | None = None, *, field: str | None = None):
        self.kind = kind
        self.field = field
        super().__init__(message or _DEFAULT_MESSAGES[kind])

    @classmethod
    def missing(cls, field: str, message: str | None = None) -> AuditParseError:
        """Build a MISSING_FIELD error for ``field``."""
        return cls(ErrorKind.MISSING_FIELD, message or f"{field} key not found", field=field)

    @classmethod
    def not_a_number(cls, field: str, value: str) -> AuditParseError:
        """Build a NUMERIC_CONVERSION error for ``field``."""
        return cls(
            ErrorKind.NUMERIC_CONVERSION,
            f"failed to parse {field}: invalid number {value!r}",
            field=field,
        )

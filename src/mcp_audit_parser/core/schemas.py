"""Serializable views of parsed audit messages."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .auparse import AuditMessage


class ParsedRecord(BaseModel):
    record_type: str = Field(description="Audit record type name, e.g. SYSCALL or PATH.")
    timestamp: str = Field(description="Event time in UTC (ISO-8601, millisecond precision).")
    sequence: int = Field(ge=0, description="Audit event sequence number.")
    data: dict[str, str] = Field(
        default_factory=dict, description="Enriched key/value fields of the record body."
    )
    tags: list[str] = Field(default_factory=list, description="Audit rule keys (-k) for the event.")
    error: str | None = Field(default=None, description="Why the body could not be fully parsed.")
    raw: str | None = Field(default=None, description="The original log line.")

    @classmethod
    def from_message(
        cls,
        msg: AuditMessage,
        *,
        include_raw: bool = False,
    ) -> ParsedRecord:
        """Build a record from a message, parsing its body if needed."""
        error = msg.error
        if error is None:
            data, tags = dict(msg.data()), list(msg.tags())
        else:
            # Tags extracted before the failing step survive in the summary.
            data, tags = {}, msg.to_summary().get("tags", [])
        return cls(
            record_type=msg.record_type.name,
            timestamp=msg.timestamp.isoformat(timespec="milliseconds"),
            sequence=msg.sequence,
            data=data,
            tags=tags,
            error=str(error) if error is not None else None,
            raw=msg.raw_data if include_raw else None,
        )

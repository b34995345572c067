"""The parsed audit message and its lazily computed, memoized fields."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..errors import AuditParseError, ErrorKind
from ..models import FieldStore, flatten
from ..tables import RecordType
from .enrichment import apply_generic_steps, apply_type_steps
from .normalizer import normalize_message
from .tokenizer import extract_key_value_pairs

logger = logging.getLogger(__name__)

RESERVED_SUMMARY_KEYS = ("record_type", "@timestamp", "sequence", "raw_msg", "tags", "error")


@dataclass(slots=True, eq=False)
class AuditMessage:
    """A single audit record whose body is parsed on first access.

    The header (type, timestamp, sequence) is parsed eagerly by
    :func:`~mcp_audit_parser.core.auparse.header.parse`; the body is only
    tokenized and enriched when :meth:`data`, :meth:`tags` or
    :meth:`to_summary` is first called. The outcome, success or error, is
    cached and returned on every later call.
    """

    record_type: RecordType
    timestamp: datetime  # UTC, millisecond precision
    sequence: int
    raw_data: str
    offset: int | None = None  # index into raw_data where the body begins

    _data: dict[str, str] | None = field(default=None, init=False, repr=False)
    _tags: list[str] = field(default_factory=list, init=False, repr=False)
    _error: AuditParseError | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def body(self) -> str | None:
        """The message text after the header, or None if there is none."""
        if self.offset is None:
            return None
        return self.raw_data[self.offset :]

    @property
    def error(self) -> AuditParseError | None:
        """The error from parsing the body, computing it if needed."""
        self._ensure_computed(None, None)
        return self._error

    def data(
        self,
        fields: FieldStore | None = None,
        out: dict[str, str] | None = None,
    ) -> dict[str, str]:
        """Return the enriched key/value pairs of the message body.

        ``fields`` and ``out`` are optional scratch containers that let a
        caller reuse allocations across many messages. Both are cleared before
        use. The returned mapping *is* ``out``, so a caller that reuses ``out``
        must finish with the result before parsing the next message.

        Raises AuditParseError (cached) if parsing or enrichment failed.
        """
        self._ensure_computed(fields, out)
        if self._error is not None:
            raise self._error
        assert self._data is not None
        return self._data

    def tags(self) -> list[str]:
        """Return the audit rule keys attached to this message."""
        self._ensure_computed(None, None)
        if self._error is not None:
            raise self._error
        return self._tags

    def to_summary(
        self,
        fields: FieldStore | None = None,
        out: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Return a new dict with the parsed fields plus well-known keys.

        ``record_type``, ``@timestamp``, ``sequence``, ``raw_msg`` and
        ``tags`` take precedence over parsed fields with the same name. When
        parsing failed an ``error`` key holds the error message; rule key
        tags extracted before the failure are still included.
        """
        self._ensure_computed(fields, out)

        summary: dict[str, Any] = dict(self._data or {})
        summary["record_type"] = self.record_type.name
        summary["@timestamp"] = self.timestamp.isoformat(timespec="milliseconds")
        summary["sequence"] = str(self.sequence)
        summary["raw_msg"] = self.raw_data
        if self._tags:
            summary["tags"] = list(self._tags)
        if self._error is not None:
            summary["error"] = str(self._error)
        return summary

    def _ensure_computed(self, fields: FieldStore | None, out: dict[str, str] | None) -> None:
        if self._data is not None or self._error is not None:
            return
        with self._lock:
            if self._data is not None or self._error is not None:
                return
            try:
                self._data = self._compute({} if fields is None else fields, {} if out is None else out)
            except AuditParseError as e:
                logger.debug(
                    "Failed to parse %s message (sequence=%d): %s",
                    self.record_type.name,
                    self.sequence,
                    e,
                )
                self._error = e

    def _compute(self, fields: FieldStore, out: dict[str, str]) -> dict[str, str]:
        fields.clear()
        out.clear()

        body = self.body
        if body is None:
            raise AuditParseError(ErrorKind.NO_DATA)

        try:
            extract_key_value_pairs(normalize_message(self.record_type, body), fields)
            self._tags = apply_generic_steps(fields)
            apply_type_steps(self.record_type, fields)
            return flatten(fields, out)
        finally:
            # The richer orig/value pairs are not kept past this call.
            fields.clear()

"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from mcp_audit_parser.core.auparse import parse_log_line
from mcp_audit_parser.core.errors import AuditParseError
from mcp_audit_parser.core.log_service import iter_messages
from mcp_audit_parser.core.schemas import ParsedRecord
from mcp_audit_parser.core.tables import RecordType

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000
HARD_LIMIT_ENV = "AUDIT_PARSER_HARD_LIMIT"


def _hard_limit() -> int:
    """Return the result cap, optionally lowered or raised via the environment."""
    env = os.getenv(HARD_LIMIT_ENV)
    if not env:
        return HARD_LIMIT
    try:
        value = int(env)
    except ValueError as exc:
        raise ValueError(f"{HARD_LIMIT_ENV} must be an integer") from exc
    if value < 1:
        raise ValueError(f"{HARD_LIMIT_ENV} must be >= 1")
    return value


def parse_iso_dt(s: str) -> datetime:
    """Parse an ISO-8601 datetime; naive values are taken as UTC."""
    try:
        dt = datetime.fromisoformat(s.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(
            f"Invalid datetime '{s}'. Expected ISO-8601, e.g. 2017-03-07T04:59:29Z."
        ) from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_record_types(names: Sequence[str] | None) -> list[RecordType] | None:
    """Parse user-supplied record type names (case-insensitive)."""
    if not names:
        return None
    out: list[RecordType] = []
    for s in names:
        name = s.strip()
        if not name:
            continue
        try:
            out.append(RecordType.from_name(name))
        except AuditParseError as e:
            raise ValueError(
                f"Unknown record type '{s}'. "
                "Use names such as SYSCALL, EXECVE or PATH, or UNKNOWN[<code>]."
            ) from e
    return out or None


def parse_audit_line_impl(*, line: str, include_raw: bool = False) -> dict[str, Any]:
    """Implementation for the `parse_audit_line` MCP tool.

    A line whose header cannot be parsed raises ValueError. A line whose body
    fails enrichment is still returned, with ``error`` set.
    """
    if not line.strip():
        raise ValueError("line must not be empty")
    try:
        msg = parse_log_line(line)
    except AuditParseError as e:
        raise ValueError(f"Not an audit log line: {e}") from e
    return ParsedRecord.from_message(msg, include_raw=include_raw).model_dump()


async def parse_audit_log_impl(
    *,
    log_path: str,
    record_types: Sequence[str] | None = None,
    since: str | None = None,
    until: str | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
) -> dict[str, Any]:
    """Implementation for the `parse_audit_log` MCP tool.

    Notes
    -----
    - since/until select a half-open [since, until) window in UTC.
    - limit defaults to DEFAULT_LIMIT and is capped at the hard limit.
    - ``truncated`` is true when more matching records were available.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, _hard_limit())

    types = parse_record_types(record_types)
    window_since = parse_iso_dt(since) if since else None
    window_until = parse_iso_dt(until) if until else None

    records: list[dict[str, Any]] = []
    truncated = False
    async for msg in iter_messages(
        log_path,
        record_types=types,
        since=window_since,
        until=window_until,
        contains=contains,
    ):
        if len(records) >= limit:
            truncated = True
            break
        records.append(ParsedRecord.from_message(msg, include_raw=include_raw).model_dump())

    return {
        "count": len(records),
        "truncated": truncated,
        "records": records,
    }

"""Audit log loading, filtering and iteration.

This module is the main integration point that reads audit log files and
returns parsed :class:`AuditMessage` objects or their summaries.
"""

from __future__ import annotations

import gzip
import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.threadpool import wrap

from .auparse import AuditMessage, parse_log_line
from .errors import AuditParseError
from .models import FieldStore
from .tables import RecordType

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open an audit log for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


def _normalize_ts(ts: datetime, *, default_tz: tzinfo) -> datetime:
    """Normalize timestamps to timezone-aware UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=default_tz)
    return ts.astimezone(UTC)


def _normalize_window(
    *,
    since: datetime | None,
    until: datetime | None,
    default_tz: tzinfo,
) -> tuple[datetime | None, datetime | None]:
    """Normalize a [since, until) window into UTC."""
    if since is not None:
        since = _normalize_ts(since, default_tz=default_tz)
    if until is not None:
        until = _normalize_ts(until, default_tz=default_tz)

    if since is not None and until is not None and since >= until:
        raise ValueError("since must be < until")

    return since, until


async def iter_messages(
    log_path: str | Path,
    *,
    record_types: Iterable[RecordType] | None = None,
    since: datetime | None = None,
    until: datetime | None = None,
    contains: str | None = None,
    default_tz: tzinfo = UTC,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[AuditMessage]:
    """Yield messages from an audit log in file order.

    Only the header of each line is parsed here. Lines whose header cannot be
    parsed are logged and skipped. Bodies are parsed lazily when the caller
    asks a message for its data.
    """
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Audit log not found: {path}")

    since, until = _normalize_window(since=since, until=until, default_tz=default_tz)

    allowed: set[RecordType] | None = None
    if record_types is not None:
        allowed = set(record_types)
        if not allowed:
            return

    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        async for line_no, line in _enumerate_async(f, start=1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            if contains is not None and contains not in line:
                continue

            try:
                msg = parse_log_line(line)
            except AuditParseError as e:
                logger.debug("Skipping %s:%d: %s", path.name, line_no, e)
                continue

            if allowed is not None and msg.record_type not in allowed:
                continue
            if since is not None and msg.timestamp < since:
                continue
            if until is not None and msg.timestamp >= until:
                continue

            yield msg


async def iter_summaries(log_path: str | Path, **iter_kwargs) -> AsyncIterator[dict[str, Any]]:
    """Yield ``to_summary()`` dicts for every message ``iter_messages`` yields.

    One pair of scratch containers is shared by all messages of the file.
    """
    fields: FieldStore = {}
    out: dict[str, str] = {}
    async for msg in iter_messages(log_path, **iter_kwargs):
        yield msg.to_summary(fields, out)


async def get_summaries(
    log_path: str | Path,
    *,
    limit: int | None = None,
    **iter_kwargs,
) -> list[dict[str, Any]]:
    """Collect iter_summaries into a list, stopping after ``limit`` items."""
    if limit is not None and limit <= 0:
        raise ValueError("limit must be > 0")

    summaries: list[dict[str, Any]] = []
    async for summary in iter_summaries(log_path, **iter_kwargs):
        summaries.append(summary)
        if limit is not None and len(summaries) >= limit:
            break
    return summaries


async def _enumerate_async(iterable, start: int = 0):
    """Async enumerate helper for async iterators."""
    index = start
    async for item in iterable:
        yield index, item
        index += 1

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from mcp_audit_parser.core.errors import AuditParseError
from mcp_audit_parser.core.log_service import iter_summaries
from mcp_audit_parser.core.tables import RecordType
from mcp_audit_parser.tools.parse import parse_iso_dt


def _parse_record_type(s: str) -> RecordType:
    try:
        return RecordType.from_name(s)
    except AuditParseError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_dt(s: str) -> datetime:
    try:
        return parse_iso_dt(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


async def _print_summaries(
    path: Path,
    *,
    record_types: list[RecordType] | None,
    since: datetime | None,
    until: datetime | None,
    contains: str | None,
    max_results: int | None,
    include_raw: bool,
) -> int:
    count = 0
    async for summary in iter_summaries(
        path,
        record_types=record_types,
        since=since,
        until=until,
        contains=contains,
    ):
        if not include_raw:
            summary.pop("raw_msg", None)
        print(json.dumps(summary, ensure_ascii=False))
        count += 1
        if max_results is not None and count >= max_results:
            break
    return count


def main() -> None:
    p = argparse.ArgumentParser(description="Parse a Linux audit log into JSON lines.")
    p.add_argument("log_path")
    p.add_argument(
        "--type",
        dest="record_types",
        action="append",
        type=_parse_record_type,
        default=None,
        help="Only include this record type (repeatable, e.g. --type SYSCALL --type EXECVE)",
    )
    p.add_argument("--since", type=_parse_dt, default=None, help="ISO8601 start time (assumes UTC if tz missing)")
    p.add_argument("--until", type=_parse_dt, default=None, help="ISO8601 end time (assumes UTC if tz missing)")
    p.add_argument("--contains", default=None, help="Substring filter applied to the raw line")
    p.add_argument("--max", dest="max_results", type=int, default=None, help="Max results to return (default: no cap)")
    p.add_argument("--no-raw", dest="include_raw", action="store_false", help="Drop raw_msg from each summary")
    p.set_defaults(include_raw=True)

    args = p.parse_args()
    path = Path(args.log_path)

    try:
        if args.max_results is not None and args.max_results <= 0:
            raise ValueError("--max must be > 0")
        count = asyncio.run(
            _print_summaries(
                path,
                record_types=args.record_types,
                since=args.since,
                until=args.until,
                contains=args.contains,
                max_results=args.max_results,
                include_raw=args.include_raw,
            )
        )
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    print(f"Parsed {count} audit records.", file=sys.stderr)


if __name__ == "__main__":
    main()

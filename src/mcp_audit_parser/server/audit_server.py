"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: parse a single audit line or a whole audit log
- Resources: addressable data blobs (help, schema, audit log via URI)
- Prompts: reusable conversation templates that clients can invoke

Run locally (stdio):
    python -m mcp_audit_parser.server.audit_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_audit_parser.prompts.registry import register_prompts
from mcp_audit_parser.resources.registry import register_resources
from mcp_audit_parser.tools.parse import parse_audit_line_impl, parse_audit_log_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Send log records to stderr at AUDIT_PARSER_LOG_LEVEL (default INFO).

    stdout carries the MCP stdio protocol, so logging must stay on stderr.
    Per-line parse failures are only visible at DEBUG.
    """
    level_name = os.getenv("AUDIT_PARSER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("audit-parser", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
def parse_audit_line(line: str, include_raw: bool = False) -> dict[str, Any]:
    """Parse one Linux audit log line into enriched fields.

    Parameters
    ----------
    line:
        A line as written to audit.log, e.g.
        ``type=SYSCALL msg=audit(1490137971.011:50406): arch=c000003e syscall=59 ...``.
    include_raw:
        Whether to include the original line in the result.

    Returns
    -------
    dict:
        {"record_type", "timestamp", "sequence", "data", "tags", "error", "raw"}
    """
    return parse_audit_line_impl(line=line, include_raw=include_raw)


@mcp.tool()
async def parse_audit_log(
    log_path: str,
    record_types: Sequence[str] | None = None,
    since: str | None = None,
    until: str | None = None,
    contains: str | None = None,
    limit: int | None = None,
    include_raw: bool = False,
) -> dict[str, Any]:
    """Return parsed audit records from a log file.

    Parameters
    ----------
    log_path:
        Path to a local audit log. Supports plain text and .gz.
    record_types:
        Only return these record types (e.g., ["SYSCALL", "EXECVE"]). Case-insensitive.
    since/until:
        ISO-8601 datetimes (e.g., 2017-03-07T04:59:29Z). If timezone is omitted, UTC is assumed.
    contains:
        Substring filter applied to the raw line.
    limit:
        Maximum number of records returned (hard-capped in the implementation).
    include_raw:
        Whether to include the original raw line in each record.

    Returns
    -------
    dict:
        {"count": int, "truncated": bool, "records": list[dict]}
    """
    return await parse_audit_log_impl(
        log_path=log_path,
        record_types=record_types,
        since=since,
        until=until,
        contains=contains,
        limit=limit,
        include_raw=include_raw,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

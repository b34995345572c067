"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP


def _format_record_types(record_types: Sequence[str] | str) -> str:
    """Return record types as a JSON array literal for prompt display."""
    if isinstance(record_types, str):
        items = [s.strip().upper() for s in record_types.split(",") if s.strip()]
    else:
        items = [str(s).strip().upper() for s in record_types if str(s).strip()]
    if not items:
        return "[]"
    quoted = ", ".join(f'"{item}"' for item in items)
    return f"[{quoted}]"


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def investigate_audit_log(
        log_path: str,
        record_types: Sequence[str] | str = ("SYSCALL", "EXECVE", "USER_LOGIN", "AVC"),
        since: str | None = None,
        until: str | None = None,
        contains: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build a prompt for a security review of an audit log."""
        call_lines = [f"- log_path: {log_path}"]
        if since is not None:
            call_lines.append(f"- since: {since}")
        if until is not None:
            call_lines.append(f"- until: {until}")
        if contains is not None:
            call_lines.append(f"- contains: {contains}")
        call_lines.append(f"- record_types: {_format_record_types(record_types)}")
        call_lines.append("- include_raw: true")
        call_block = "\n".join(call_lines)
        return [
            {
                "role": "system",
                "content": (
                    "You are a Linux security analyst reviewing auditd records. "
                    "Base every statement on the parsed records. "
                    "Do not invent details; if the evidence is insufficient, say so."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Review the audit log using parse_audit_log. Follow this workflow:\n"
                    "- Always call parse_audit_log first with the parameters below.\n"
                    "- Records that share a sequence number belong to the same event; "
                    "read them together (SYSCALL + EXECVE + CWD + PATH + PROCTITLE).\n"
                    "- Pay attention to result=fail, exit codes such as EACCES or EPERM, "
                    "auid changes and the rule keys in tags.\n"
                    "- Records with an error field could not be fully parsed; mention them "
                    "but do not guess their contents.\n"
                    "- If no records are returned, state that clearly and suggest widening "
                    "the time window or record types.\n\n"
                    "Call parse_audit_log with:\n"
                    f"{call_block}\n\n"
                    "Return this structure:\n"
                    "1) Notable events (1-5 bullets, each with sequence and @timestamp)\n"
                    "2) Evidence (quoted raw lines)\n"
                    "3) Assessment (benign / suspicious / unknown, with one sentence why)\n"
                    "4) Next actions (2-4 bullets)\n"
                ),
            },
            {
                "role": "user",
                "content": [
                    {
                        "type": "text",
                        "text": "Optional: if you need raw context, you can read the log via:",
                    },
                    {"type": "resource", "uri": f"log://{log_path}"},
                ],
            },
        ]

    @mcp.prompt()
    def explain_audit_record(line: str) -> list[dict[str, Any]]:
        """Build a prompt that explains a single audit record."""
        return [
            {
                "role": "system",
                "content": (
                    "You explain Linux audit records to engineers who are not auditd experts. "
                    "Be concrete and short."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Call parse_audit_line with the line below, then explain:\n"
                    "- what the record type means\n"
                    "- who did it (auid, uid, exe, comm)\n"
                    "- what was attempted and whether it succeeded\n"
                    "- which audit rule (tags) matched, if any\n\n"
                    f"Line:\n{line}\n"
                ),
            },
        ]

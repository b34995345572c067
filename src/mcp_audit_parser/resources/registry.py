"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

import asyncio
import gzip
import os
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_audit_parser.core.schemas import ParsedRecord
from mcp_audit_parser.core.tables import RecordType

ALLOWED_FILE_SUFFIXES = {".log", ".txt"}
BASE_DIR_ENV = "AUDIT_PARSER_BASE_DIR"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"

SAMPLE_AUDIT_LOG = (
    'type=SYSCALL msg=audit(1490137971.011:50406): arch=c000003e syscall=59 success=yes exit=0 '
    'a0=7f7242278f28 a1=7f72422793d8 a2=7f7242279368 a3=0 items=2 ppid=1 pid=2019 auid=4294967295 '
    'uid=0 gid=0 euid=0 suid=0 fsuid=0 egid=0 sgid=0 fsgid=0 tty=(none) ses=4294967295 '
    'comm="ls" exe="/bin/ls" subj=system_u:system_r:init_t:s0 key="exec"\n'
    'type=EXECVE msg=audit(1490137971.011:50406): argc=2 a0="ls" a1=2D6C\n'
    "type=CWD msg=audit(1490137971.011:50406): cwd=2F726F6F74\n"
    'type=PATH msg=audit(1490137971.011:50406): item=0 name="/bin/ls" inode=262174 dev=fd:00 '
    "mode=0100755 ouid=0 ogid=0 rdev=00:00 obj=system_u:object_r:bin_t:s0 nametype=NORMAL\n"
    "type=PROCTITLE msg=audit(1490137971.011:50406): proctitle=6C73002D6C\n"
    "type=USER_LOGIN msg=audit(1490137972.123:50407): pid=2101 uid=0 auid=4294967295 "
    "ses=4294967295 msg='op=login acct=28696E76616C6964207573657229 exe=\"/usr/sbin/sshd\" "
    "hostname=? addr=10.0.0.7 terminal=sshd res=failed'\n"
)


def _base_dir() -> Path:
    """Return the directory that log:// URIs are confined to (AUDIT_PARSER_BASE_DIR)."""
    raw = os.getenv(BASE_DIR_ENV, os.getcwd())
    return Path(raw).resolve()


def _confine_to_base(path: str) -> Path:
    """Resolve an audit log path, rejecting anything outside the base directory.

    Relative paths are taken relative to the base directory, so
    ``log://audit.log`` and ``log:///var/log/audit/audit.log`` both work when the
    base directory is ``/var/log/audit``.
    """
    base = _base_dir()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = base / p
    p = p.resolve()
    if base not in p.parents and p != base:
        raise ValueError(f"Audit log path escapes {BASE_DIR_ENV}: {path}")
    return p


def _allowed_suffix(path: Path) -> str:
    """Return the effective suffix for allowlist checks.

    ``audit.log.gz`` and rotated logs such as ``audit.log.3`` count as ``.log``.
    """
    suffix = path.suffix.lower()
    if suffix == ".gz":
        path = path.with_suffix("")
        suffix = path.suffix.lower()
    if suffix[1:].isdigit():
        suffix = path.with_suffix("").suffix.lower()
    return suffix


def _ensure_allowed_suffix(path: Path) -> None:
    """Reject files that are not audit logs or their rotated copies."""
    suffix = _allowed_suffix(path)
    if suffix not in ALLOWED_FILE_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        raise ValueError(f"Not an audit log file: {path.name}. Allowed: {allowed}, rotated .N and .gz.")


def _resolve_audit_log(path: str) -> Path:
    """Resolve a log:// path to an existing, allowed audit log file."""
    resolved = _confine_to_base(path)
    if not resolved.is_file():
        raise FileNotFoundError(f"Audit log not found: {resolved}")
    _ensure_allowed_suffix(resolved)
    return resolved


def _read_audit_log(path: Path) -> str:
    """Read a whole audit log, decompressing rotated .gz logs."""
    if path.suffix.lower() == ".gz":
        with gzip.open(path, mode="rt", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
            return f.read()
    return path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)


def record_type_names() -> list[str]:
    """Return the names of all known record types, in code order."""
    return [rt.name for rt in sorted(RecordType)]


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://audit-parser/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        allowed = ", ".join(sorted(ALLOWED_FILE_SUFFIXES))
        base = _base_dir()
        return (
            "Resources:\n"
            "- app://audit-parser/help\n"
            "- app://audit-parser/record-types\n"
            "- app://audit-parser/schemas/parsed-record\n"
            "- app://audit-parser/examples/sample-log\n"
            f"- log://{{path}} (restricted to {BASE_DIR_ENV}; allowed: {allowed}, "
            "rotated .N and .gz)\n"
            f"\nBase directory: {base}\n"
        )

    @mcp.resource("app://audit-parser/examples/sample-log")
    def sample_log() -> str:
        """Return a tiny sample audit log for demos and tests."""
        return SAMPLE_AUDIT_LOG

    @mcp.resource("app://audit-parser/record-types")
    def record_types() -> list[str]:
        """Return the record type names accepted by the tools."""
        return record_type_names()

    @mcp.resource("app://audit-parser/schemas/parsed-record")
    def parsed_record_schema() -> dict[str, Any]:
        """Return the JSON schema for parsed audit records."""
        return ParsedRecord.model_json_schema()

    @mcp.resource("log://{path}")
    async def read_log(path: str) -> str:
        """Return the full audit log contents."""
        p = _resolve_audit_log(path)
        return await asyncio.to_thread(_read_audit_log, p)

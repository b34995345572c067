"""Per-type rewriting of message bodies that are not plain key=value lists."""

from __future__ import annotations

import re

from ..errors import AuditParseError, ErrorKind
from ..tables import RecordType

# Beginning of an SELinux AVC message, e.g. "avc:  denied  { read } for  ".
_SELINUX_AVC_RE = re.compile(r"avc:\s+(\w+)\s+\{\s*(.*)\s*\}\s+for\s+")


def _normalize_avc(body: str) -> str:
    m = _SELINUX_AVC_RE.search(body)
    if m is None:
        # Other AVC producers (e.g. AppArmor) already use key=value pairs.
        return body
    if len(m.groups()) != 2:
        raise AuditParseError(ErrorKind.PARSE_FAILURE)

    result, perms = m.group(1), m.group(2).split()
    return f"seresult={result} seperms={','.join(perms)} {body[m.end():]}"


def _normalize_login(body: str) -> str:
    # "old auid=" / "new ses=" -> "old_auid=" / "new_ses="
    body = body.replace("old ", "old_", 2)
    return body.replace("new ", "new_", 2)


def normalize_message(record_type: RecordType, body: str) -> str:
    """Rewrite ``body`` so that it tokenizes as key=value pairs."""
    if record_type == RecordType.AVC:
        return _normalize_avc(body)
    if record_type == RecordType.LOGIN:
        return _normalize_login(body)
    return body

from __future__ import annotations

from mcp_audit_parser.core.auparse import extract_key_value_pairs, normalize_message
from mcp_audit_parser.core.tables import RecordType


def test_selinux_avc_is_rewritten_to_key_values() -> None:
    body = (
        ' avc:  denied  { read write } for  pid=1234 comm="httpd" '
        'scontext=system_u:system_r:httpd_t:s0 tclass=file'
    )
    out = normalize_message(RecordType.AVC, body)
    assert out.startswith("seresult=denied seperms=read,write pid=1234")

    store = extract_key_value_pairs(out, {})
    assert store["seresult"].value == "denied"
    assert store["seperms"].value == "read,write"
    assert store["comm"].value == "httpd"
    assert store["tclass"].value == "file"


def test_apparmor_avc_is_left_alone() -> None:
    body = ' apparmor="DENIED" operation="open" profile="/usr/sbin/cupsd"'
    assert normalize_message(RecordType.AVC, body) == body


def test_login_old_new_prefixes_become_keys() -> None:
    body = " pid=1 uid=0 old auid=4294967295 new auid=1000 old ses=4294967295 new ses=3 res=1"
    out = normalize_message(RecordType.LOGIN, body)
    store = extract_key_value_pairs(out, {})
    assert store["old_auid"].value == "4294967295"
    assert store["new_auid"].value == "1000"
    assert store["old_ses"].value == "4294967295"
    assert store["new_ses"].value == "3"


def test_other_types_pass_through() -> None:
    body = " arch=c000003e syscall=59"
    assert normalize_message(RecordType.SYSCALL, body) is body

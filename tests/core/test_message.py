from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from mcp_audit_parser.core.auparse import RESERVED_SUMMARY_KEYS, parse, parse_log_line
from mcp_audit_parser.core.errors import AuditParseError, ErrorKind
from mcp_audit_parser.core.models import FieldStore
from mcp_audit_parser.core.tables import RecordType


def test_syscall_end_to_end(syscall_line: str) -> None:
    msg = parse_log_line(syscall_line)
    data = msg.data()

    assert data["arch"] == "x86_64"
    assert data["syscall"] == "execve"
    assert data["result"] == "success"
    assert data["exit"] == "0"
    assert data["auid"] == "unset"
    assert data["ses"] == "unset"
    assert data["comm"] == "ls"
    assert data["exe"] == "/bin/ls"
    assert data["tty"] == "(none)"
    assert data["subj_domain"] == "init_t"
    for consumed in ("success", "key", "subj"):
        assert consumed not in data
    assert msg.tags() == ["exec"]
    assert msg.error is None


def test_summary(syscall_line: str) -> None:
    summary = parse_log_line(syscall_line).to_summary()

    assert summary["record_type"] == "SYSCALL"
    assert summary["@timestamp"] == "2017-03-21T23:12:51.011+00:00"
    assert summary["sequence"] == "50406"
    assert summary["raw_msg"] == syscall_line
    assert summary["tags"] == ["exec"]
    assert summary["syscall"] == "execve"
    assert "error" not in summary


def test_summary_reserved_keys_win() -> None:
    line = "type=USER msg=audit(1490137971.011:7): pid=5 record_type=fake sequence=1 raw_msg=x"
    summary = parse_log_line(line).to_summary()
    assert summary["record_type"] == "USER"
    assert summary["sequence"] == "7"
    assert summary["raw_msg"] == line
    assert summary["pid"] == "5"
    assert set(RESERVED_SUMMARY_KEYS) >= {"record_type", "@timestamp", "sequence", "raw_msg"}


def test_summary_without_tags_has_no_tags_key() -> None:
    summary = parse_log_line("type=CWD msg=audit(1490137971.011:7): cwd=/").to_summary()
    assert "tags" not in summary


def test_failure_is_cached() -> None:
    msg = parse_log_line('type=EXECVE msg=audit(1490137971.011:50406): argc=2 a0="ls"')

    with pytest.raises(AuditParseError) as first:
        msg.data()
    with pytest.raises(AuditParseError) as second:
        msg.data()
    assert first.value is second.value
    assert msg.error is first.value
    assert first.value.kind is ErrorKind.MISSING_FIELD

    with pytest.raises(AuditParseError):
        msg.tags()

    summary = msg.to_summary()
    assert summary["error"] == "failed to find arg a1"
    assert "argc" not in summary
    assert summary["record_type"] == "EXECVE"


def test_message_without_body() -> None:
    msg = parse(RecordType.EOE, "audit(1490137971.011:50406)")
    with pytest.raises(AuditParseError) as exc:
        msg.data()
    assert exc.value.kind is ErrorKind.NO_DATA
    assert msg.to_summary()["error"] == "message has no data content"


def test_data_is_memoized(syscall_line: str) -> None:
    msg = parse_log_line(syscall_line)
    assert msg.data() is msg.data()


def test_scratch_containers_are_reused(syscall_line: str) -> None:
    fields: FieldStore = {}
    out: dict[str, str] = {"stale": "value"}

    first = parse_log_line(syscall_line)
    data = first.data(fields, out)
    assert data is out
    assert "stale" not in out
    assert out["syscall"] == "execve"
    assert fields == {}

    # The second message writes into the same mapping.
    second = parse_log_line("type=CWD msg=audit(1490137971.011:50406): cwd=/tmp")
    assert second.data(fields, out) is out
    assert out == {"cwd": "/tmp"}


def test_summaries_survive_scratch_reuse(syscall_line: str) -> None:
    fields: FieldStore = {}
    out: dict[str, str] = {}
    first = parse_log_line(syscall_line).to_summary(fields, out)
    parse_log_line("type=CWD msg=audit(1490137971.011:50406): cwd=/tmp").to_summary(fields, out)
    assert first["syscall"] == "execve"
    assert "cwd" not in first


def test_concurrent_access_computes_once(syscall_line: str) -> None:
    msg = parse_log_line(syscall_line)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: msg.data(), range(32)))
    assert all(r is results[0] for r in results)
    assert results[0]["syscall"] == "execve"


def test_failed_type_step_keeps_rule_tags() -> None:
    msg = parse_log_line('type=SYSCALL msg=audit(1490137971.011:1): syscall=59 key="exec"')

    summary = msg.to_summary()

    assert summary["tags"] == ["exec"]
    assert summary["error"] == "arch key not found"
    assert "syscall" not in summary
    with pytest.raises(AuditParseError):
        msg.tags()

from __future__ import annotations

from pathlib import Path

import pytest

from mcp_audit_parser.core.tables import RecordType
from mcp_audit_parser.tools import parse as parse_module
from mcp_audit_parser.tools.parse import (
    parse_audit_line_impl,
    parse_audit_log_impl,
    parse_iso_dt,
    parse_record_types,
)


def test_parse_audit_line_impl(syscall_line: str) -> None:
    out = parse_audit_line_impl(line=syscall_line)

    assert out["record_type"] == "SYSCALL"
    assert out["timestamp"] == "2017-03-21T23:12:51.011+00:00"
    assert out["sequence"] == 50406
    assert out["data"]["syscall"] == "execve"
    assert out["data"]["arch"] == "x86_64"
    assert out["data"]["result"] == "success"
    assert out["tags"] == ["exec"]
    assert out["error"] is None
    assert out["raw"] is None


def test_parse_audit_line_impl_include_raw(syscall_line: str) -> None:
    out = parse_audit_line_impl(line=syscall_line, include_raw=True)
    assert out["raw"] == syscall_line


def test_parse_audit_line_impl_reports_body_errors() -> None:
    out = parse_audit_line_impl(line="type=SOCKADDR msg=audit(1490137971.011:1): saddr=zz")
    assert out["data"] == {}
    assert out["tags"] == []
    assert out["error"].startswith("failed to parse saddr")


def test_parse_audit_line_impl_keeps_tags_on_error() -> None:
    out = parse_audit_line_impl(
        line='type=EXECVE msg=audit(1490137971.011:1): argc=2 a0="ls" key="exec"'
    )
    assert out["error"] == "failed to find arg a1"
    assert out["data"] == {}
    assert out["tags"] == ["exec"]


@pytest.mark.parametrize("line", ["", "   ", "not an audit line", "type=NOPE msg=audit(1.2:3): a=1"])
def test_parse_audit_line_impl_rejects_bad_lines(line: str) -> None:
    with pytest.raises(ValueError):
        parse_audit_line_impl(line=line)


@pytest.mark.asyncio
async def test_parse_audit_log_impl_filters(tmp_path: Path, write_audit_log) -> None:
    log = tmp_path / "audit.log"
    write_audit_log(log)

    out = await parse_audit_log_impl(
        log_path=str(log),
        record_types=["syscall"],
        since="2017-03-21T23:12:52Z",
        include_raw=True,
    )

    assert out["count"] == 1
    assert out["truncated"] is False
    record = out["records"][0]
    assert record["sequence"] == 50407
    assert record["data"]["exit"] == "EACCES"
    assert record["tags"] == ["access", "tamper"]
    assert record["raw"].startswith("type=SYSCALL msg=audit(1490137972.500:50407)")


@pytest.mark.asyncio
async def test_parse_audit_log_impl_limit_truncates(tmp_path: Path, write_audit_log) -> None:
    log = tmp_path / "audit.log"
    write_audit_log(log)

    out = await parse_audit_log_impl(log_path=str(log), limit=3)

    assert out["count"] == 3
    assert out["truncated"] is True
    assert [r["record_type"] for r in out["records"]] == ["SYSCALL", "EXECVE", "CWD"]


@pytest.mark.asyncio
async def test_parse_audit_log_impl_hard_limit_env(
    tmp_path: Path, write_audit_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    log = tmp_path / "audit.log"
    write_audit_log(log)
    monkeypatch.setenv(parse_module.HARD_LIMIT_ENV, "2")

    out = await parse_audit_log_impl(log_path=str(log), limit=100)

    assert out["count"] == 2


@pytest.mark.asyncio
async def test_parse_audit_log_impl_bad_hard_limit_env(
    tmp_path: Path, write_audit_log, monkeypatch: pytest.MonkeyPatch
) -> None:
    log = tmp_path / "audit.log"
    write_audit_log(log)
    monkeypatch.setenv(parse_module.HARD_LIMIT_ENV, "lots")

    with pytest.raises(ValueError):
        await parse_audit_log_impl(log_path=str(log))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kwargs",
    [
        {"limit": 0},
        {"record_types": ["NOT_A_TYPE"]},
        {"since": "yesterday"},
        {"since": "2017-03-22T00:00:00Z", "until": "2017-03-21T00:00:00Z"},
    ],
)
async def test_parse_audit_log_impl_validation(tmp_path: Path, write_audit_log, kwargs) -> None:
    log = tmp_path / "audit.log"
    write_audit_log(log)
    with pytest.raises(ValueError):
        await parse_audit_log_impl(log_path=str(log), **kwargs)


@pytest.mark.asyncio
async def test_parse_audit_log_impl_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await parse_audit_log_impl(log_path=str(tmp_path / "missing.log"))


def test_parse_record_types() -> None:
    assert parse_record_types(None) is None
    assert parse_record_types(["", " "]) is None
    assert parse_record_types(["execve", "UNKNOWN[1300]"]) == [RecordType.EXECVE, RecordType.SYSCALL]


def test_parse_iso_dt_assumes_utc() -> None:
    assert parse_iso_dt("2017-03-21T23:12:51").isoformat() == "2017-03-21T23:12:51+00:00"
    assert parse_iso_dt("2017-03-22T01:12:51+02:00").isoformat() == "2017-03-21T23:12:51+00:00"

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from mcp_audit_parser.core.auparse import parse_log_line
from mcp_audit_parser.resources import registry
from mcp_audit_parser.resources.registry import (
    SAMPLE_AUDIT_LOG,
    _allowed_suffix,
    _read_audit_log,
    _resolve_audit_log,
    record_type_names,
)


def test_sample_log_parses_cleanly() -> None:
    for line in SAMPLE_AUDIT_LOG.splitlines():
        msg = parse_log_line(line)
        assert msg.error is None, line


def test_record_type_names() -> None:
    names = record_type_names()
    assert "SYSCALL" in names
    assert "EXECVE" in names
    assert names.index("SYSCALL") < names.index("AVC")


@pytest.mark.parametrize(
    ("name", "suffix"),
    [
        ("audit.log", ".log"),
        ("audit.log.3", ".log"),
        ("audit.log.gz", ".log"),
        ("audit.log.2.gz", ".log"),
        ("notes.md", ".md"),
    ],
)
def test_allowed_suffix(name: str, suffix: str) -> None:
    assert _allowed_suffix(Path(name)) == suffix


def test_resolve_audit_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path))
    log = tmp_path / "audit.log.1"
    log.write_text("x\n", encoding="utf-8")
    (tmp_path / "secrets.md").write_text("x\n", encoding="utf-8")

    assert _resolve_audit_log("audit.log.1") == log.resolve()
    with pytest.raises(ValueError, match="Not an audit log file: secrets.md"):
        _resolve_audit_log("secrets.md")
    with pytest.raises(ValueError, match="escapes AUDIT_PARSER_BASE_DIR"):
        _resolve_audit_log("../outside.log")
    with pytest.raises(FileNotFoundError, match="Audit log not found"):
        _resolve_audit_log("missing.log")


def test_rotated_gzip_log_is_readable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(registry.BASE_DIR_ENV, str(tmp_path))
    log = tmp_path / "audit.log.2.gz"
    with gzip.open(log, "wt", encoding="utf-8") as f:
        f.write(SAMPLE_AUDIT_LOG)

    assert _read_audit_log(_resolve_audit_log("audit.log.2.gz")) == SAMPLE_AUDIT_LOG

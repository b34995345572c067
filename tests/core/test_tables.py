from __future__ import annotations

import pytest

from mcp_audit_parser.core.errors import AuditParseError, ErrorKind
from mcp_audit_parser.core.tables import (
    AUDIT_ARCH_NAMES,
    RecordType,
    arch_name,
    errno_name,
    signal_name,
    syscall_name,
)


def test_record_type_names() -> None:
    assert RecordType.from_name("SYSCALL") is RecordType.SYSCALL
    assert RecordType.from_name("syscall") is RecordType.SYSCALL
    assert RecordType.from_name("UNKNOWN[1334]") is RecordType.BPF
    assert str(RecordType.EXECVE) == "EXECVE"
    assert int(RecordType.SYSCALL) == 1300


def test_unknown_record_type_code_round_trips() -> None:
    rt = RecordType.from_name("UNKNOWN[1999]")
    assert int(rt) == 1999
    assert rt.name == "UNKNOWN[1999]"
    assert RecordType(1999).name == "UNKNOWN[1999]"


@pytest.mark.parametrize("name", ["", "NOPE", "UNKNOWN[", "UNKNOWN[abc]", "UNKNOWN[4294967296]"])
def test_bad_record_type_names(name: str) -> None:
    with pytest.raises(AuditParseError) as exc:
        RecordType.from_name(name)
    assert exc.value.kind is ErrorKind.UNKNOWN_RECORD_TYPE


def test_arch_names() -> None:
    assert arch_name(0xC000003E) == "x86_64"
    assert arch_name(0x40000003) == "i386"
    assert arch_name(0xC00000B7) == "aarch64"
    assert arch_name(0x1234) == "unknown[1234]"


def test_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        AUDIT_ARCH_NAMES[1] = "x"  # type: ignore[index]


@pytest.mark.parametrize(
    ("arch", "number", "name"),
    [
        ("x86_64", 0, "read"),
        ("x86_64", 2, "open"),
        ("x86_64", 59, "execve"),
        ("x86_64", 435, "clone3"),
        ("aarch64", 56, "openat"),
        ("aarch64", 221, "execve"),
        ("aarch64", 435, "clone3"),
    ],
)
def test_syscall_names(arch: str, number: int, name: str) -> None:
    assert syscall_name(arch, number) == name


def test_unknown_syscalls() -> None:
    assert syscall_name("x86_64", 100000) is None
    assert syscall_name("sparc", 1) is None


def test_errno_and_signal_names() -> None:
    assert errno_name(1) == "EPERM"
    assert errno_name(13) == "EACCES"
    assert errno_name(0) is None
    assert signal_name(9) == "SIGKILL"
    assert signal_name(31) == "SIGSYS"
    assert signal_name(64) is None

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

SYSCALL_LINE = (
    "type=SYSCALL msg=audit(1490137971.011:50406): arch=c000003e syscall=59 "
    "success=yes exit=0 a0=7f7242278f28 a1=7f72422793d8 a2=7f7242279368 a3=0 items=2 "
    "ppid=1 pid=2019 auid=4294967295 uid=0 gid=0 euid=0 suid=0 fsuid=0 egid=0 sgid=0 "
    'fsgid=0 tty=(none) ses=4294967295 comm="ls" exe="/bin/ls" '
    'subj=system_u:system_r:init_t:s0 key="exec"'
)

AUDIT_LOG_LINES = [
    SYSCALL_LINE,
    'type=EXECVE msg=audit(1490137971.011:50406): argc=2 a0="ls" a1=2D6C',
    "type=CWD msg=audit(1490137971.011:50406): cwd=2F726F6F74",
    'type=PATH msg=audit(1490137971.011:50406): item=0 name="/bin/ls" inode=262174 '
    "dev=fd:00 mode=0100755 ouid=0 ogid=0 rdev=00:00 obj=system_u:object_r:bin_t:s0 "
    "nametype=NORMAL",
    "type=PROCTITLE msg=audit(1490137971.011:50406): proctitle=6C73002D6C",
    "type=SYSCALL msg=audit(1490137972.500:50407): arch=c000003e syscall=2 success=no "
    "exit=-13 a0=7ffd a1=0 a2=1b6 a3=24 items=1 ppid=2000 pid=2020 auid=1000 uid=1000 "
    'gid=1000 euid=1000 ses=3 comm="cat" exe="/usr/bin/cat" key=6163636573730174616D706572',
    "this line is not an audit record",
    "type=SOCKADDR msg=audit(1490137973.000:50408): saddr=020000357F0000010000000000000000",
]


@pytest.fixture
def write_audit_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text("\n".join(AUDIT_LOG_LINES) + "\n", encoding="utf-8")

    return _write


@pytest.fixture
def write_bytes() -> Callable[[Path, list[bytes]], None]:
    def _write(path: Path, lines: list[bytes]) -> None:
        path.write_bytes(b"".join(line + b"\n" for line in lines))

    return _write


@pytest.fixture
def syscall_line() -> str:
    return SYSCALL_LINE

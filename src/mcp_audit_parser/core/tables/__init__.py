"""Static lookup tables used to decode audit fields.

All tables are built at import time and are read-only afterwards.
"""

from __future__ import annotations

from .arches import AUDIT_ARCH_NAMES, arch_name
from .names import ERRNO_NAMES, SIGNAL_NAMES, errno_name, signal_name
from .record_types import RecordType
from .syscalls import AUDIT_SYSCALLS, syscall_name

__all__ = [
    "AUDIT_ARCH_NAMES",
    "AUDIT_SYSCALLS",
    "ERRNO_NAMES",
    "RecordType",
    "SIGNAL_NAMES",
    "arch_name",
    "errno_name",
    "signal_name",
    "syscall_name",
]

"""AUDIT_ARCH_* codes (ELF machine | 64-bit | little-endian flags)."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

_ARCH_64BIT = 0x80000000
_ARCH_LE = 0x40000000
_ARCH_CONVENTION_MIPS64_N32 = 0x20000000

AUDIT_ARCH_NAMES: Mapping[int, str] = MappingProxyType(
    {
        183 | _ARCH_64BIT | _ARCH_LE: "aarch64",
        0x9026 | _ARCH_64BIT | _ARCH_LE: "alpha",
        40 | _ARCH_LE: "arm",
        40: "armeb",
        76 | _ARCH_LE: "cris",
        0x5441: "frv",
        3 | _ARCH_LE: "i386",
        50 | _ARCH_64BIT | _ARCH_LE: "ia64",
        258 | _ARCH_64BIT | _ARCH_LE: "loongarch64",
        88: "m32r",
        4: "m68k",
        189: "microblaze",
        8: "mips",
        8 | _ARCH_LE: "mipsel",
        8 | _ARCH_64BIT: "mips64",
        8 | _ARCH_64BIT | _ARCH_CONVENTION_MIPS64_N32: "mips64n32",
        8 | _ARCH_64BIT | _ARCH_LE: "mipsel64",
        8 | _ARCH_64BIT | _ARCH_LE | _ARCH_CONVENTION_MIPS64_N32: "mipsel64n32",
        92: "openrisc",
        15: "parisc",
        15 | _ARCH_64BIT: "parisc64",
        20: "ppc",
        21 | _ARCH_64BIT: "ppc64",
        21 | _ARCH_64BIT | _ARCH_LE: "ppc64le",
        243 | _ARCH_LE: "riscv32",
        243 | _ARCH_64BIT | _ARCH_LE: "riscv64",
        22: "s390",
        22 | _ARCH_64BIT: "s390x",
        42: "sh",
        42 | _ARCH_LE: "shel",
        42 | _ARCH_64BIT: "sh64",
        42 | _ARCH_64BIT | _ARCH_LE: "shel64",
        2: "sparc",
        43 | _ARCH_64BIT: "sparc64",
        191 | _ARCH_64BIT | _ARCH_LE: "tilegx",
        191 | _ARCH_LE: "tilegx32",
        188 | _ARCH_LE: "tilepro",
        110 | _ARCH_LE: "unicore",
        62 | _ARCH_64BIT | _ARCH_LE: "x86_64",
        94: "xtensa",
    }
)


def arch_name(code: int) -> str:
    """Return the architecture name for an AUDIT_ARCH code.

    Unknown codes are rendered as ``unknown[<hex>]`` so the value stays
    recognizable downstream.
    """
    code &= 0xFFFFFFFF
    name = AUDIT_ARCH_NAMES.get(code)
    if name is not None:
        return name
    return f"unknown[{code:x}]"

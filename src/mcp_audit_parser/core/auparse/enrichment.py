"""Field enrichment applied after tokenization.

Enrichment runs in two phases:

1. Generic steps that apply to every record (unset ids, SELinux subject,
   result/exit normalization, rule key tags, ``cwd``). These are best effort.
2. Steps chosen by record type. A missing field that the record type always
   carries is an error.

Steps are plain functions over a :data:`FieldStore`. Each step replaces fields
with ``Field.with_value`` so that the original text stays available to later
steps (hex decoding always works from the original token).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from types import MappingProxyType

from ..errors import AuditParseError
from ..models import Field, FieldStore
from ..sockaddr import decode_sockaddr
from ..tables import RecordType, arch_name, errno_name, signal_name, syscall_name
from .hexcodec import decode_hex_field, hex_to_string
from .rule_key import extract_rule_tags

Step = Callable[[FieldStore], None]

UNSET_ID_VALUES = frozenset({"4294967295", "-1"})
SELINUX_CONTEXT_PARTS = ("_user", "_role", "_domain", "_level", "_category")
_DIGITS = {10: frozenset("0123456789"), 16: frozenset("0123456789abcdefABCDEF")}


def _to_int(key: str, value: str, *, base: int = 10) -> int:
    # Plain ASCII digits with an optional sign; no "0x" prefix or "_".
    digits = value[1:] if value[:1] in ("+", "-") else value
    if not digits or not _DIGITS[base].issuperset(digits):
        raise AuditParseError.not_a_number(key, value)
    return int(value, base)


# Generic steps


def normalize_unset_id(key: str, store: FieldStore) -> None:
    """Replace the "no id" sentinels (uint32 max, -1) with ``unset``."""
    f = store.get(key)
    if f is not None and f.value in UNSET_ID_VALUES:
        store[key] = f.with_value("unset")


def parse_selinux_context(key: str, store: FieldStore, *, required: bool = False) -> None:
    """Split a ``user:role:domain:level:category`` context into five fields.

    Any colons beyond the fourth stay in the category part.
    """
    f = store.pop(key, None)
    if f is None:
        if required:
            raise AuditParseError.missing(key, "SELinux: subj or obj key not found")
        return

    parts = f.value.split(":", len(SELINUX_CONTEXT_PARTS) - 1)
    for suffix, part in zip(SELINUX_CONTEXT_PARTS, parts):
        store[key + suffix] = Field.plain(part)


def set_result(store: FieldStore, *, required: bool = False) -> None:
    """Collapse ``success`` (syscalls) or ``res`` (others) into ``result``."""
    f = store.pop("success", None)
    if f is None:
        f = store.pop("res", None)
    if f is None:
        if required:
            raise AuditParseError.missing("success", "success and res key not found")
        return

    v = f.value.lower()
    if v in ("yes", "1") or v.startswith("suc"):
        store["result"] = Field.plain("success")
    else:
        store["result"] = Field.plain("fail")


def set_exit_name(store: FieldStore, *, required: bool = False) -> None:
    """Replace a negative ``exit`` code with its errno name."""
    f = store.get("exit")
    if f is None:
        if required:
            raise AuditParseError.missing("exit")
        return

    try:
        code = _to_int("exit", f.value)
    except AuditParseError:
        if required:
            raise
        return

    if code >= 0:
        return
    name = errno_name(-code)
    if name is not None:
        store["exit"] = f.with_value(name)


def hex_decode(key: str, store: FieldStore, *, required: bool = False) -> None:
    """Decode a field whose original text is hex; leave plain text alone."""
    f = store.get(key)
    if f is None:
        if required:
            raise AuditParseError.missing(key, f"hexEncode: {key} key not found")
        return

    decoded = decode_hex_field(f.orig)
    if decoded is not None:
        store[key] = f.with_value(decoded)


GENERIC_STEPS: tuple[Step, ...] = (
    partial(normalize_unset_id, "auid"),
    partial(normalize_unset_id, "old-auid"),
    partial(normalize_unset_id, "ses"),
    # Many record types carry a subject context.
    partial(parse_selinux_context, "subj"),
    set_result,
    set_exit_name,
)


def apply_generic_steps(store: FieldStore) -> list[str]:
    """Run the record-independent steps and return the rule key tags."""
    for step in GENERIC_STEPS:
        step(store)
    tags = extract_rule_tags(store)
    hex_decode("cwd", store)
    return tags


# Type-specific steps


def set_arch_name(store: FieldStore) -> None:
    """Decode the hex AUDIT_ARCH code in ``arch`` into a name."""
    f = store.get("arch")
    if f is None:
        raise AuditParseError.missing("arch")
    store["arch"] = f.with_value(arch_name(_to_int("arch", f.value, base=16)))


def set_syscall_name(store: FieldStore) -> None:
    """Translate the syscall number using the (already decoded) arch."""
    f = store.get("syscall")
    if f is None:
        raise AuditParseError.missing("syscall")
    number = _to_int("syscall", f.value)

    arch = store.get("arch")
    if arch is None:
        raise AuditParseError.missing(
            "arch", "arch key not found so syscall cannot be translated to a name"
        )

    name = syscall_name(arch.value, number)
    if name is not None:
        store["syscall"] = f.with_value(name)


def set_signal_name(store: FieldStore) -> None:
    """Translate the signal number in ``sig`` into its name."""
    f = store.get("sig")
    if f is None:
        raise AuditParseError.missing("sig")
    name = signal_name(_to_int("sig", f.value))
    if name is not None:
        store["sig"] = f.with_value(name)


def decode_saddr(store: FieldStore) -> None:
    """Replace ``saddr`` with the fields of the decoded socket address."""
    f = store.get("saddr")
    if f is None:
        raise AuditParseError.missing("saddr")
    decoded = decode_sockaddr(f.value)

    del store["saddr"]
    for k, v in decoded.items():
        store[k] = Field.plain(v)


def decode_execve_args(store: FieldStore) -> None:
    """Decode hex-encoded ``a0``..``a{argc-1}`` arguments in place."""
    argc = store.get("argc")
    if argc is None:
        raise AuditParseError.missing("argc")
    count = _to_int("argc", argc.value)
    if not 0 <= count <= 0xFFFFFFFF:
        raise AuditParseError.not_a_number("argc", argc.value)

    for i in range(count):
        key = f"a{i}"
        arg = store.get(key)
        if arg is None:
            raise AuditParseError.missing(key, f"failed to find arg {key}")
        try:
            store[key] = arg.with_value(hex_to_string(arg.orig))
        except ValueError:
            # Quoted plain-text argument.
            continue


SYSCALL_STEPS: tuple[Step, ...] = (
    set_arch_name,
    set_syscall_name,
    partial(hex_decode, "exe"),
)

TYPE_STEPS: Mapping[RecordType, tuple[Step, ...]] = MappingProxyType(
    {
        # SECCOMP records carry the same arch/syscall fields as SYSCALL.
        RecordType.SECCOMP: (set_signal_name, *SYSCALL_STEPS),
        RecordType.SYSCALL: SYSCALL_STEPS,
        RecordType.SOCKADDR: (decode_saddr,),
        RecordType.PROCTITLE: (partial(hex_decode, "proctitle", required=True),),
        RecordType.USER_CMD: (partial(hex_decode, "cmd", required=True),),
        RecordType.TTY: (partial(hex_decode, "data", required=True),),
        RecordType.USER_TTY: (partial(hex_decode, "data", required=True),),
        RecordType.EXECVE: (decode_execve_args,),
        RecordType.PATH: (
            partial(parse_selinux_context, "obj"),
            partial(hex_decode, "name"),
        ),
        # acct is only present on failed logins.
        RecordType.USER_LOGIN: (partial(hex_decode, "acct"),),
    }
)


def apply_type_steps(record_type: RecordType, store: FieldStore) -> None:
    """Run the steps registered for ``record_type``; stop at the first error."""
    for step in TYPE_STEPS.get(record_type, ()):
        step(store)


def enrich(record_type: RecordType, store: FieldStore) -> list[str]:
    """Run the full pipeline over ``store`` and return the rule key tags."""
    tags = apply_generic_steps(store)
    apply_type_steps(record_type, store)
    return tags

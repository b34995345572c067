from __future__ import annotations

import pytest

from mcp_audit_parser.core.errors import AuditParseError, ErrorKind
from mcp_audit_parser.core.sockaddr import decode_sockaddr


def test_ipv4() -> None:
    assert decode_sockaddr("020000357F0000010000000000000000") == {
        "family": "ipv4",
        "addr": "127.0.0.1",
        "port": "53",
    }


def test_ipv6() -> None:
    saddr = "0A00005000000000" + "20010DB8000000000000000000000001" + "00000000"
    assert decode_sockaddr(saddr) == {
        "family": "ipv6",
        "addr": "2001:db8::1",
        "port": "80",
    }


def test_unix_path() -> None:
    # /run/x followed by NUL padding
    out = decode_sockaddr("01002F72756E2F780000")
    assert out == {"family": "unix", "path": "/run/x"}


def test_netlink() -> None:
    out = decode_sockaddr("100000003412000000000000")
    assert out["family"] == "netlink"
    assert out["netlink_pid"] == "4660"
    assert out["saddr"] == "100000003412000000000000"


def test_other_family_keeps_raw() -> None:
    out = decode_sockaddr("11000300")
    assert out == {"family": "17", "saddr": "11000300"}


@pytest.mark.parametrize("saddr", ["zz", "0", "02", "02000035", "0A000050"])
def test_bad_addresses(saddr: str) -> None:
    with pytest.raises(AuditParseError) as exc:
        decode_sockaddr(saddr)
    assert exc.value.kind is ErrorKind.ADDRESS_DECODE
    assert exc.value.field == "saddr"

"""Decoding of the hex-encoded ``saddr`` field of SOCKADDR records."""

from __future__ import annotations

import ipaddress
import struct

from .errors import AuditParseError, ErrorKind

AF_UNIX = 1
AF_INET = 2
AF_INET6 = 10
AF_NETLINK = 16

_FAMILY_NAMES = {
    AF_UNIX: "unix",
    AF_INET: "ipv4",
    AF_INET6: "ipv6",
    AF_NETLINK: "netlink",
}


def _decode_error(message: str) -> AuditParseError:
    return AuditParseError(ErrorKind.ADDRESS_DECODE, f"failed to parse saddr: {message}", field="saddr")


def decode_sockaddr(saddr: str) -> dict[str, str]:
    """Decode a raw ``struct sockaddr`` dump into flat fields.

    The family is stored in host (little-endian) order, ports in network
    order. Families without a dedicated layout keep the raw hex in ``saddr``.
    """
    try:
        data = bytes.fromhex(saddr)
    except ValueError as e:
        raise _decode_error("invalid hex") from e
    if len(data) < 2:
        raise _decode_error("address too short")

    (family,) = struct.unpack_from("<H", data, 0)
    out: dict[str, str] = {"family": _FAMILY_NAMES.get(family, str(family))}

    if family == AF_UNIX:
        out["path"] = data[2:].rstrip(b"\x00").decode("utf-8", errors="replace")
    elif family == AF_INET:
        if len(data) < 8:
            raise _decode_error("ipv4 address too short")
        (port,) = struct.unpack_from(">H", data, 2)
        out["addr"] = str(ipaddress.IPv4Address(data[4:8]))
        out["port"] = str(port)
    elif family == AF_INET6:
        if len(data) < 24:
            raise _decode_error("ipv6 address too short")
        (port,) = struct.unpack_from(">H", data, 2)
        out["addr"] = str(ipaddress.IPv6Address(data[8:24]))
        out["port"] = str(port)
    elif family == AF_NETLINK:
        if len(data) >= 8:
            (pid,) = struct.unpack_from("<I", data, 4)
            out["netlink_pid"] = str(pid)
        out["saddr"] = saddr
    else:
        out["saddr"] = saddr
    return out

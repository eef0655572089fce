"""DHCP client packets: discover, renew, release and offer parsing."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from ipaddress import IPv4Address

_HEADER = bytes([1, 1, 6, 0])
_MAGIC_COOKIE = bytes([99, 130, 83, 99])
_OPTIONS_OFFSET = 240
_OPTIONS_SIZE = 312
_END = 255
_LEASE_TIME = 51
_RENEW_TIME = 58
_REBIND_TIME = 59


@dataclass(frozen=True)
class DhcpOffer:
    """The address offered by a server and the timers it announced."""

    offered_ip: IPv4Address
    lease_time: int | None = None
    renew_time: int | None = None
    rebind_time: int | None = None


def _build(xid: int, options: bytes) -> bytes:
    fixed = bytearray(_OPTIONS_OFFSET)
    fixed[0:4] = _HEADER
    struct.pack_into("<I", fixed, 4, xid & 0xFFFFFFFF)
    fixed[236:240] = _MAGIC_COOKIE
    return bytes(fixed) + options + bytes([_END])


def build_discover(xid: int) -> bytes:
    """DHCPDISCOVER asking for subnet mask, router, DNS and domain name."""
    return _build(xid, bytes([53, 1, 1, 55, 4, 1, 3, 6, 15]))


def build_renew(xid: int) -> bytes:
    """Renewal packet carrying message type 5."""
    return _build(xid, bytes([53, 1, 5]))


def build_release(xid: int) -> bytes:
    """DHCPRELEASE packet."""
    return _build(xid, bytes([53, 1, 7]))


def parse_offer(packet: bytes) -> DhcpOffer:
    """Read the offered address and lease timers from a server reply."""
    if len(packet) < _OPTIONS_OFFSET:
        raise ValueError("DHCP packet too short")
    offered = IPv4Address(bytes(packet[16:20]))
    options = bytes(packet[_OPTIONS_OFFSET:_OPTIONS_OFFSET + _OPTIONS_SIZE]).ljust(
        _OPTIONS_SIZE + 8, b"\0"
    )
    timers: dict[int, int] = {}
    i = 0
    while i < _OPTIONS_SIZE:
        code = options[i]
        i += 1
        if code == _END:
            break
        length = options[i]
        i += 1
        if code in (_LEASE_TIME, _RENEW_TIME, _REBIND_TIME):
            timers[code] = int.from_bytes(options[i:i + 4], "big")
        i += length
    return DhcpOffer(
        offered_ip=offered,
        lease_time=timers.get(_LEASE_TIME),
        renew_time=timers.get(_RENEW_TIME),
        rebind_time=timers.get(_REBIND_TIME),
    )
"""ARP request building and address resolution with a one-entry cache."""

from __future__ import annotations

from typing import Protocol

_FRAME_SIZE = 42
_RESPONSE_MAX = 60
_ARP_HEADER = bytes([0, 1, 8, 0, 6, 4, 0, 1])


class EthernetLink(Protocol):
    """A raw Ethernet link."""

    def send(self, frame: bytes) -> None: ...

    def recv(self, maxlen: int) -> bytes: ...


def _check(value: bytes, size: int, what: str) -> bytes:
    value = bytes(value)
    if len(value) != size:
        raise ValueError(f"{what} must be {size} bytes")
    return value


def build_arp_request(sender_mac: bytes, sender_ip: bytes, target_ip: bytes) -> bytes:
    """Return the 28-byte ARP request asking for ``target_ip``."""
    return (
        _ARP_HEADER
        + _check(sender_mac, 6, "sender MAC")
        + _check(sender_ip, 4, "sender IP")
        + bytes(6)
        + _check(target_ip, 4, "target IP")
    )


class ArpResolver:
    """Resolves IPv4 addresses to MAC addresses over an Ethernet link."""

    def __init__(self, link: EthernetLink, attempts: int = 3, polls: int = 10000) -> None:
        self.link = link
        self.attempts = attempts
        self.polls = polls
        self._cache: tuple[bytes, bytes] | None = None

    def resolve(self, sender_mac: bytes, sender_ip: bytes, target_ip: bytes) -> bytes:
        """Return the MAC address of ``target_ip``; raises ``TimeoutError``."""
        request = build_arp_request(sender_mac, sender_ip, target_ip)
        target = bytes(target_ip)
        if self._cache is not None and self._cache[0] == target:
            return self._cache[1]
        frame = request.ljust(_FRAME_SIZE, b"\0")
        for _ in range(self.attempts):
            self.link.send(frame)
            for _ in range(self.polls):
                response = self.link.recv(_RESPONSE_MAX)
                if (
                    len(response) >= _FRAME_SIZE
                    and response[12] == 0x08
                    and response[13] == 0x06
                    and response[28:32] == target
                ):
                    mac = bytes(response[22:28])
                    self._cache = (target, mac)
                    return mac
        raise TimeoutError("no ARP reply for target")
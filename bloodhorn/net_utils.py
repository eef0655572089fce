"""Small helpers shared by the network code."""

from __future__ import annotations

import struct


def net_checksum(data: bytes) -> int:
    """Return the 16-bit one's complement checksum of ``data``.

    Words are read big-endian; an odd trailing byte is padded with zero.
    """
    padded = bytes(data)
    if len(padded) % 2:
        padded += b"\0"
    total = 0
    for (word,) in struct.iter_unpack(">H", padded):
        total += word
        if total > 0xFFFF:
            total -= 0xFFFF
    return ~total & 0xFFFF
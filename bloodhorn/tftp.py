"""TFTP read requests, data packets and option acknowledgements."""

from __future__ import annotations

import re

_DEFAULT_BLKSIZE = 512
_OP_RRQ = b"\x00\x01"
_OP_DATA = 3
_ATOI = re.compile(r"\s*([+-]?\d+)")


def build_rrq(filename: str, blksize: int = _DEFAULT_BLKSIZE) -> bytes:
    """Build an octet-mode read request; a ``blksize`` above 512 is requested."""
    packet = _OP_RRQ + filename.encode("utf-8") + b"\0" + b"octet\0"
    if blksize > _DEFAULT_BLKSIZE:
        packet += b"blksize\0" + str(blksize).encode("ascii") + b"\0"
    return packet + b"\0"


def parse_data(packet: bytes) -> tuple[int, bytes]:
    """Return the block number and payload of a DATA packet.

    A payload starting with two zero bytes is taken as empty; otherwise
    up to 512 bytes are returned.
    """
    if len(packet) < 4 or packet[1] != _OP_DATA:
        raise ValueError("not a TFTP DATA packet")
    block = (packet[2] << 8) | packet[3]
    if packet[4:6] == b"\0\0" or len(packet) <= 4:
        return block, b""
    return block, bytes(packet[4:4 + _DEFAULT_BLKSIZE])


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    return int(match.group(1)) if match else 0


def parse_oack(packet: bytes) -> int | None:
    """Return the negotiated ``blksize`` from an OACK, or ``None`` if absent."""
    fields = bytes(packet[2:]).split(b"\0")
    for index, field in enumerate(fields):
        if not field:
            break
        if field == b"blksize":
            value = fields[index + 1] if index + 1 < len(fields) else b""
            return _atoi(value.decode("latin-1"))
    return None
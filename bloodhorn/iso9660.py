"""Reader for files on an ISO 9660 volume."""

from __future__ import annotations

import struct

from .fs_common import SectorDevice

BLOCK_SIZE = 2048
_SECTORS_PER_BLOCK = 4
_PVD_BLOCK = 16
_ROOT_RECORD = 156
_FLAG_DIRECTORY = 0x02


def _read_block(device: SectorDevice, lba: int, block: int) -> bytes:
    return device.read_sectors(lba + block * _SECTORS_PER_BLOCK, _SECTORS_PER_BLOCK)


def _name_matches(name: bytes, part: bytes) -> bool:
    """Case-insensitive comparison over the record name's length."""
    padded = part[:len(name)].ljust(len(name), b"\0")
    for a, b in zip(name.upper(), padded.upper()):
        if a != b:
            return False
        if a == 0:
            break
    return True


def _find_entry(
    device: SectorDevice, lba: int, extent: int, size: int, path: str
) -> tuple[int, int] | None:
    part, slash, rest = path.partition("/")
    part_bytes = part.encode("utf-8")
    for offset in range(0, size, BLOCK_SIZE):
        block = _read_block(device, lba, extent + offset // BLOCK_SIZE)
        pos = 0
        while pos + 33 <= BLOCK_SIZE:
            length = block[pos]
            if length == 0:
                break
            name_len = block[pos + 32]
            name = block[pos + 33:pos + 33 + name_len]
            if _name_matches(name, part_bytes):
                (entry_extent,) = struct.unpack_from("<I", block, pos + 2)
                (entry_size,) = struct.unpack_from("<I", block, pos + 10)
                flags = block[pos + 25]
                if not slash:
                    return entry_extent, entry_size
                if flags & _FLAG_DIRECTORY:
                    found = _find_entry(device, lba, entry_extent, entry_size, rest)
                    if found is not None:
                        return found
            pos += length
    return None


def read_file(device: SectorDevice, lba: int, path: str, max_size: int) -> bytes:
    """Read up to ``max_size`` bytes of the file at ``path`` (``/``-separated)."""
    pvd = _read_block(device, lba, _PVD_BLOCK)
    if pvd[0] != 1 or pvd[1:6] != b"CD001":
        raise ValueError("no ISO 9660 primary volume descriptor")
    (root_extent,) = struct.unpack_from("<I", pvd, _ROOT_RECORD + 2)
    (root_size,) = struct.unpack_from("<I", pvd, _ROOT_RECORD + 10)
    found = _find_entry(device, lba, root_extent, root_size, path)
    if found is None:
        raise FileNotFoundError(path)
    extent, size = found
    to_read = min(size, max(max_size, 0))
    blocks = (to_read + BLOCK_SIZE - 1) // BLOCK_SIZE
    data = b"".join(_read_block(device, lba, extent + i) for i in range(blocks))
    return data[:to_read]
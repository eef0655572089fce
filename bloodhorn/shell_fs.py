"""Rescue shell commands that list and print files on FAT32 and ext2 volumes."""

from __future__ import annotations

from . import ext2, fat32
from .fs_common import SectorDevice

_ATTR_DIRECTORY = 0x10


def _limit(text: str, maxlen: int) -> str:
    return text[:max(maxlen - 1, 0)]


def _as_text(data: bytes, maxlen: int) -> str:
    return data[:max(maxlen - 1, 0)].split(b"\0", 1)[0].decode("utf-8", "replace")


def ls_fat32(device: SectorDevice, lba: int, maxlen: int) -> str:
    """Space-separated raw 8.3 names of the non-directory root entries."""
    bs = fat32.read_bootsector(device, lba)
    sector = device.read_sector(lba + bs.data_start)
    names: list[str] = []
    for offset in range(0, len(sector), 32):
        entry = sector[offset:offset + 32]
        if entry[0] == 0:
            break
        if entry[0] == 0xE5 or entry[11] & _ATTR_DIRECTORY:
            continue
        names.append(entry[:11].split(b"\0", 1)[0].decode("latin-1"))
    return _limit("".join(f"{name} " for name in names), maxlen)


def cat_fat32(device: SectorDevice, lba: int, filename: str, maxlen: int) -> str:
    """Contents of a root-directory file, at most ``maxlen - 1`` characters."""
    cluster = fat32.find_file(device, lba, filename)
    return _as_text(fat32.read_file(device, lba, cluster, maxlen), maxlen)


def ls_ext2(device: SectorDevice, lba: int, maxlen: int) -> str:
    """Space-separated names in the ext2 root directory."""
    names = ext2.list_root(device, lba)
    return _limit("".join(f"{name} " for name in names), maxlen)


def cat_ext2(device: SectorDevice, lba: int, filename: str, maxlen: int) -> str:
    """Contents of a root-directory file, at most ``maxlen - 1`` characters."""
    inode_num = ext2.find_file_in_root(device, lba, filename)
    return _as_text(ext2.read_file(device, lba, inode_num, maxlen), maxlen)
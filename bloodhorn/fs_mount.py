"""Checks whether a volume of a given file system can be read."""

from __future__ import annotations

from . import ext2, fat32, iso9660
from .fs_common import SectorDevice


def mount_fat32(device: SectorDevice, lba: int) -> bool:
    """True when the FAT32 boot sector at ``lba`` can be read."""
    try:
        fat32.read_bootsector(device, lba)
    except OSError:
        return False
    return True


def mount_ext2(device: SectorDevice, lba: int) -> bool:
    """True when the ext2 superblock of the volume at ``lba`` can be read."""
    try:
        ext2.read_superblock(device, lba)
    except OSError:
        return False
    return True


def mount_iso9660(device: SectorDevice, lba: int) -> bool:
    """True when the ISO 9660 volume at ``lba`` holds ``README.TXT``."""
    try:
        iso9660.read_file(device, lba, "README.TXT", 0)
    except (OSError, ValueError):
        return False
    return True
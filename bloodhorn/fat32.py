"""Reader for files in the root directory of a FAT32 volume."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass

from .fs_common import SectorDevice

END_OF_CHAIN = 0x0FFFFFF8
_ENTRY_SIZE = 32
_ATTR_VOLUME_ID = 0x08
_DELETED = 0xE5


@dataclass(frozen=True)
class Fat32BootSector:
    """The BIOS parameter block of a FAT32 volume."""

    jump: bytes
    oem: bytes
    bytes_per_sector: int
    sectors_per_cluster: int
    reserved_sectors: int
    num_fats: int
    root_entries: int
    total_sectors: int
    media_type: int
    sectors_per_fat: int
    sectors_per_track: int
    num_heads: int
    hidden_sectors: int
    large_sectors: int
    sectors_per_fat_32: int
    root_cluster: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Fat32BootSector:
        fields = struct.unpack_from("<3s8sHBHBHHBHHHII", data, 0)
        (fat32_size,) = struct.unpack_from("<I", data, 36)
        (root_cluster,) = struct.unpack_from("<I", data, 44)
        return cls(*fields, fat32_size, root_cluster)

    @property
    def fat_size(self) -> int:
        """Sectors per FAT, from the 16-bit field or else the 32-bit one."""
        return self.sectors_per_fat or self.sectors_per_fat_32

    @property
    def data_start(self) -> int:
        """First data sector, relative to the start of the volume."""
        return self.reserved_sectors + self.num_fats * self.fat_size


def read_bootsector(device: SectorDevice, lba: int) -> Fat32BootSector:
    """Read the boot sector of the volume starting at ``lba``."""
    return Fat32BootSector.from_bytes(device.read_sector(lba))


def _require_geometry(bs: Fat32BootSector) -> None:
    if bs.bytes_per_sector == 0 or bs.sectors_per_cluster == 0:
        raise ValueError("boot sector has no usable geometry")


def _fat_entry(device: SectorDevice, lba: int, bs: Fat32BootSector, cluster: int) -> int:
    sector = bs.reserved_sectors + (cluster * 4) // bs.bytes_per_sector
    offset = (cluster * 4) % bs.bytes_per_sector
    (entry,) = struct.unpack_from("<I", device.read_sector(lba + sector), offset)
    return entry & 0x0FFFFFFF


def _clusters(device: SectorDevice, lba: int, bs: Fat32BootSector, cluster: int) -> Iterator[int]:
    seen: set[int] = set()
    while cluster < END_OF_CHAIN:
        if cluster < 2 or cluster in seen:
            raise ValueError(f"corrupt cluster chain at cluster {cluster}")
        seen.add(cluster)
        yield cluster
        cluster = _fat_entry(device, lba, bs, cluster)


def _first_sector(lba: int, bs: Fat32BootSector, cluster: int) -> int:
    return lba + bs.data_start + (cluster - 2) * bs.sectors_per_cluster


def _fat_name(name: str) -> bytes:
    return name.encode("utf-8")[:11].ljust(11, b" ")


def find_file(device: SectorDevice, lba: int, filename: str) -> int:
    """Return the first cluster of ``filename`` (an 11-character 8.3 name)."""
    bs = read_bootsector(device, lba)
    _require_geometry(bs)
    target = _fat_name(filename)
    for cluster in _clusters(device, lba, bs, bs.root_cluster):
        first = _first_sector(lba, bs, cluster)
        for s in range(bs.sectors_per_cluster):
            sector = device.read_sector(first + s)
            for offset in range(0, len(sector), _ENTRY_SIZE):
                entry = sector[offset:offset + _ENTRY_SIZE]
                if entry[0] == 0:
                    break
                if entry[0] == _DELETED or entry[11] & _ATTR_VOLUME_ID:
                    continue
                if entry[:11] == target:
                    (high,) = struct.unpack_from("<H", entry, 20)
                    (low,) = struct.unpack_from("<H", entry, 26)
                    return (high << 16) | low
    raise FileNotFoundError(filename)


def read_file(device: SectorDevice, lba: int, cluster: int, max_size: int) -> bytes:
    """Read the cluster chain starting at ``cluster``, up to ``max_size`` bytes."""
    if max_size <= 0:
        return b""
    bs = read_bootsector(device, lba)
    _require_geometry(bs)
    chunks: list[bytes] = []
    total = 0
    for current in _clusters(device, lba, bs, cluster):
        first = _first_sector(lba, bs, current)
        for s in range(bs.sectors_per_cluster):
            if total >= max_size:
                break
            chunks.append(device.read_sector(first + s))
            total += bs.bytes_per_sector
        if total >= max_size:
            break
    return b"".join(chunks)[:max_size]
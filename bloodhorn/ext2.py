"""Reader for files in the root directory of an ext2 volume."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from dataclasses import dataclass

from .fs_common import SECTOR_SIZE, SectorDevice

_ROOT_INODE = 2
_DIRECT_BLOCKS = 12
_DEFAULT_INODE_SIZE = 128


@dataclass(frozen=True)
class Ext2SuperBlock:
    """The leading fields of an ext2 superblock plus the inode size."""

    s_inodes_count: int
    s_blocks_count: int
    s_r_blocks_count: int
    s_free_blocks_count: int
    s_free_inodes_count: int
    s_first_data_block: int
    s_log_block_size: int
    s_log_frag_size: int
    s_blocks_per_group: int
    s_frags_per_group: int
    s_inodes_per_group: int
    s_mtime: int
    s_wtime: int
    s_mnt_count: int
    s_max_mnt_count: int
    s_magic: int
    s_inode_size: int

    @classmethod
    def from_bytes(cls, data: bytes) -> Ext2SuperBlock:
        fields = struct.unpack_from("<13I3H", data, 0)
        (inode_size,) = struct.unpack_from("<H", data, 88)
        return cls(*fields, inode_size)

    @property
    def block_size(self) -> int:
        return 1024 << self.s_log_block_size

    @property
    def inode_size(self) -> int:
        """Inode size, 128 bytes when the superblock leaves it unset."""
        return self.s_inode_size or _DEFAULT_INODE_SIZE


def read_superblock(device: SectorDevice, lba: int) -> Ext2SuperBlock:
    """Read the superblock of the volume starting at ``lba``."""
    return Ext2SuperBlock.from_bytes(device.read_sector(lba + 2))


def _read_block(device: SectorDevice, lba: int, block: int, block_size: int) -> bytes:
    per_block = block_size // SECTOR_SIZE
    return device.read_sectors(lba + block * per_block, per_block)


def _read_inode(device: SectorDevice, lba: int, sb: Ext2SuperBlock, inode_num: int) -> bytes:
    if inode_num < 1:
        raise ValueError(f"invalid inode number {inode_num}")
    block_size = sb.block_size
    group_desc = device.read_sector(lba + 2 + block_size // SECTOR_SIZE)
    (inode_table,) = struct.unpack_from("<I", group_desc, 8)
    inode_size = sb.inode_size
    per_block = block_size // inode_size
    index = inode_num - 1
    block = _read_block(device, lba, inode_table + index // per_block, block_size)
    offset = (index % per_block) * inode_size
    return block[offset:offset + inode_size]


def _block_pointers(inode: bytes) -> tuple[int, ...]:
    return struct.unpack_from(f"<{_DIRECT_BLOCKS}I", inode, 40)


def _root_entries(device: SectorDevice, lba: int) -> Iterator[tuple[int, bytes]]:
    sb = read_superblock(device, lba)
    block_size = sb.block_size
    root = _read_inode(device, lba, sb, _ROOT_INODE)
    directory = _read_block(device, lba, _block_pointers(root)[0], block_size)
    offset = 0
    while offset + 8 <= block_size:
        inode_num, rec_len, name_len = struct.unpack_from("<IHB", directory, offset)
        yield inode_num, directory[offset + 8:offset + 8 + name_len]
        if rec_len == 0:
            break
        offset += rec_len


def find_file_in_root(device: SectorDevice, lba: int, filename: str) -> int:
    """Return the inode number of ``filename`` in the root directory."""
    target = filename.encode("utf-8")
    for inode_num, name in _root_entries(device, lba):
        if inode_num and name == target:
            return inode_num
    raise FileNotFoundError(filename)


def list_root(device: SectorDevice, lba: int) -> list[str]:
    """Names of the live entries in the first block of the root directory."""
    return [
        name.decode("utf-8", "replace")
        for inode_num, name in _root_entries(device, lba)
        if inode_num
    ]


def read_file(device: SectorDevice, lba: int, inode_num: int, max_size: int) -> bytes:
    """Read up to ``max_size`` bytes of a file through its direct blocks."""
    sb = read_superblock(device, lba)
    block_size = sb.block_size
    inode = _read_inode(device, lba, sb, inode_num)
    (file_size,) = struct.unpack_from("<I", inode, 4)
    to_read = min(file_size, max(max_size, 0))
    chunks: list[bytes] = []
    done = 0
    for pointer in _block_pointers(inode):
        if done >= to_read or pointer == 0:
            break
        chunk = min(block_size, to_read - done)
        chunks.append(_read_block(device, lba, pointer, block_size)[:chunk])
        done += chunk
    return b"".join(chunks)
import struct

import pytest

from bloodhorn.ext2 import find_file_in_root, list_root, read_file, read_superblock
from bloodhorn.fs_common import SectorDevice

BLOCK = 1024
FILE_INODE = 12


def _inode(size: int, blocks: list[int]) -> bytes:
    raw = bytearray(128)
    struct.pack_into("<I", raw, 4, size)
    struct.pack_into(f"<{len(blocks)}I", raw, 40, *blocks)
    return bytes(raw)


def _dirent(inode: int, rec_len: int, name: str) -> bytes:
    raw = name.encode()
    return struct.pack("<IHBB", inode, rec_len, len(raw), 2) + raw + bytes(rec_len - 8 - len(raw))


def _build_image(inode_size: int = 128, offset_sectors: int = 0) -> SectorDevice:
    img = bytearray(BLOCK * 23)
    struct.pack_into(
        "<13I3H", img, 1024,
        64, 23, 0, 0, 0, 1, 0, 0, 8192, 8192, 64, 0, 0, 0, 20, 0xEF53,
    )
    struct.pack_into("<H", img, 1024 + 88, inode_size)
    struct.pack_into("<I", img, 2048 + 8, 5)
    size = inode_size or 128
    per_block = BLOCK // size

    def put_inode(number: int, data: bytes) -> None:
        index = number - 1
        offset = (5 + index // per_block) * BLOCK + (index % per_block) * size
        img[offset:offset + len(data)] = data

    put_inode(2, _inode(BLOCK, [20]))
    put_inode(FILE_INODE, _inode(1500, [21, 22]))
    directory = (
        _dirent(2, 12, ".")
        + _dirent(2, 12, "..")
        + _dirent(0, 20, "ghost")
        + _dirent(FILE_INODE, 980, "kernel.img")
    )
    img[20 * BLOCK:21 * BLOCK] = directory
    img[21 * BLOCK:22 * BLOCK] = b"x" * BLOCK
    img[22 * BLOCK:23 * BLOCK] = b"y" * BLOCK
    return SectorDevice(bytes(512 * offset_sectors) + bytes(img))


def test_read_superblock_fields():
    sb = read_superblock(_build_image(), 0)
    assert sb.s_magic == 0xEF53
    assert sb.s_blocks_count == 23
    assert sb.block_size == 1024
    assert sb.inode_size == 128


def test_inode_size_defaults_when_unset():
    sb = read_superblock(_build_image(inode_size=0), 0)
    assert sb.s_inode_size == 0
    assert sb.inode_size == 128


def test_find_file_in_root():
    assert find_file_in_root(_build_image(), 0, "kernel.img") == FILE_INODE


def test_find_file_ignores_unused_entries():
    with pytest.raises(FileNotFoundError):
        find_file_in_root(_build_image(), 0, "ghost")


def test_find_file_missing():
    with pytest.raises(FileNotFoundError):
        find_file_in_root(_build_image(), 0, "missing")


def test_read_file_whole():
    data = read_file(_build_image(), 0, FILE_INODE, 4096)
    assert data == b"x" * 1024 + b"y" * 476


def test_read_file_limited():
    assert read_file(_build_image(), 0, FILE_INODE, 100) == b"x" * 100


@pytest.mark.parametrize("inode_size", [0, 256])
def test_other_inode_sizes(inode_size):
    device = _build_image(inode_size=inode_size)
    number = find_file_in_root(device, 0, "kernel.img")
    assert read_file(device, 0, number, 1500) == b"x" * 1024 + b"y" * 476


def test_partition_offset():
    device = _build_image(offset_sectors=6)
    assert find_file_in_root(device, 6, "kernel.img") == FILE_INODE


def test_list_root():
    assert list_root(_build_image(), 0) == [".", "..", "kernel.img"]


def test_invalid_inode_number():
    with pytest.raises(ValueError):
        read_file(_build_image(), 0, 0, 10)
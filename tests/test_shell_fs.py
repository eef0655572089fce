import struct

import pytest

from bloodhorn.fs_common import SectorDevice
from bloodhorn.shell_fs import cat_ext2, cat_fat32, ls_ext2, ls_fat32

SECTOR = 512
BLOCK = 1024
EOC = 0x0FFFFFFF
LABEL = "MYVOLUME   "
FILE_NAME = "HELLO   TXT"
TAIL_NAME = "TAIL    TXT"


def _fat_entry(name: str, attr: int, cluster: int) -> bytes:
    entry = bytearray(32)
    entry[:11] = name.encode()
    entry[11] = attr
    struct.pack_into("<H", entry, 20, cluster >> 16)
    struct.pack_into("<H", entry, 26, cluster & 0xFFFF)
    return bytes(entry)


def _fat_image() -> SectorDevice:
    img = bytearray(SECTOR * 8)
    struct.pack_into(
        "<HBHBHHBHHHIIIHHI", img, 11,
        512, 1, 2, 1, 0, 0, 0xF8, 0, 63, 255, 0, 8, 1, 0, 0, 2,
    )
    struct.pack_into("<5I", img, 2 * SECTOR, 0x0FFFFFF8, EOC, EOC, 4, EOC)
    root = b"".join(
        [
            _fat_entry(LABEL, 0x08, 0),
            _fat_entry("SUBDIR     ", 0x10, 5),
            _fat_entry(FILE_NAME, 0x20, 3),
            _fat_entry(TAIL_NAME, 0x20, 4),
        ]
    )
    img[3 * SECTOR:3 * SECTOR + len(root)] = root
    img[4 * SECTOR:5 * SECTOR] = b"A" * SECTOR
    img[5 * SECTOR:5 * SECTOR + 100] = b"B" * 100
    return SectorDevice(bytes(img))


def _dirent(inode: int, rec_len: int, name: str) -> bytes:
    raw = name.encode()
    return struct.pack("<IHBB", inode, rec_len, len(raw), 2) + raw + bytes(rec_len - 8 - len(raw))


def _ext2_image() -> SectorDevice:
    img = bytearray(BLOCK * 23)
    struct.pack_into(
        "<13I3H", img, 1024,
        64, 23, 0, 0, 0, 1, 0, 0, 8192, 8192, 64, 0, 0, 0, 20, 0xEF53,
    )
    struct.pack_into("<H", img, 1024 + 88, 128)
    struct.pack_into("<I", img, 2048 + 8, 5)
    root_inode = 5 * BLOCK + 128
    struct.pack_into("<I", img, root_inode + 4, BLOCK)
    struct.pack_into("<I", img, root_inode + 40, 20)
    file_inode = 6 * BLOCK + 3 * 128
    struct.pack_into("<I", img, file_inode + 4, 1500)
    struct.pack_into("<2I", img, file_inode + 40, 21, 22)
    directory = (
        _dirent(2, 12, ".")
        + _dirent(2, 12, "..")
        + _dirent(0, 20, "ghost")
        + _dirent(12, 980, "kernel.img")
    )
    img[20 * BLOCK:21 * BLOCK] = directory
    img[21 * BLOCK:22 * BLOCK] = b"x" * BLOCK
    img[22 * BLOCK:23 * BLOCK] = b"y" * BLOCK
    return SectorDevice(bytes(img))


def test_ls_fat32_skips_directories():
    expected = f"{LABEL} {FILE_NAME} {TAIL_NAME} "
    assert ls_fat32(_fat_image(), 0, 256) == expected


def test_ls_fat32_truncates():
    full = f"{LABEL} {FILE_NAME} {TAIL_NAME} "
    assert ls_fat32(_fat_image(), 0, 5) == full[:4]


def test_cat_fat32_limits_length():
    assert cat_fat32(_fat_image(), 0, FILE_NAME, 20) == "A" * 19


def test_cat_fat32_stops_at_nul():
    assert cat_fat32(_fat_image(), 0, TAIL_NAME, 512) == "B" * 100


def test_cat_fat32_missing():
    with pytest.raises(FileNotFoundError):
        cat_fat32(_fat_image(), 0, "NOPE    TXT", 64)


def test_ls_ext2():
    assert ls_ext2(_ext2_image(), 0, 256) == ". .. kernel.img "


def test_cat_ext2_limits_length():
    assert cat_ext2(_ext2_image(), 0, "kernel.img", 10) == "x" * 9


def test_cat_ext2_missing():
    with pytest.raises(FileNotFoundError):
        cat_ext2(_ext2_image(), 0, "ghost", 10)
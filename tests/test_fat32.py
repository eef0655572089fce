import struct

import pytest

from bloodhorn.fat32 import find_file, read_bootsector, read_file
from bloodhorn.fs_common import SectorDevice

SECTOR = 512
EOC = 0x0FFFFFFF
FILE_NAME = "HELLO   TXT"


def _dir_entry(name: bytes, attr: int, cluster: int, size: int = 0) -> bytes:
    entry = bytearray(32)
    entry[:11] = name
    entry[11] = attr
    struct.pack_into("<H", entry, 20, cluster >> 16)
    struct.pack_into("<H", entry, 26, cluster & 0xFFFF)
    struct.pack_into("<I", entry, 28, size)
    return bytes(entry)


def _build_image(offset_sectors: int = 0, fat4: int = EOC) -> SectorDevice:
    img = bytearray(SECTOR * 8)
    img[:3] = b"\xEB\x58\x90"
    img[3:11] = b"MSWIN4.1"
    struct.pack_into(
        "<HBHBHHBHHHIIIHHI", img, 11,
        512, 1, 2, 1, 0, 0, 0xF8, 0, 63, 255, 0, 8, 1, 0, 0, 2,
    )
    struct.pack_into("<5I", img, 2 * SECTOR, 0x0FFFFFF8, EOC, EOC, 4, fat4)
    root = b"".join(
        [
            _dir_entry(b"MYVOLUME   ", 0x08, 0),
            _dir_entry(b"SUBDIR     ", 0x10, 5),
            _dir_entry(b"README     ", 0x20, 0x00010005, 7),
            _dir_entry(FILE_NAME.encode(), 0x20, 3, 612),
        ]
    )
    img[3 * SECTOR:3 * SECTOR + len(root)] = root
    img[4 * SECTOR:5 * SECTOR] = b"A" * SECTOR
    img[5 * SECTOR:5 * SECTOR + 100] = b"B" * 100
    return SectorDevice(bytes(SECTOR * offset_sectors) + bytes(img))


def test_read_bootsector_fields():
    bs = read_bootsector(_build_image(), 0)
    assert bs.oem == b"MSWIN4.1"
    assert bs.bytes_per_sector == 512
    assert bs.reserved_sectors == 2
    assert bs.root_cluster == 2
    assert bs.fat_size == 1
    assert bs.data_start == 3


def test_find_file_returns_cluster():
    assert find_file(_build_image(), 0, FILE_NAME) == 3


def test_find_file_pads_short_names_and_uses_high_word():
    assert find_file(_build_image(), 0, "README") == 0x00010005


def test_find_file_skips_volume_label():
    with pytest.raises(FileNotFoundError):
        find_file(_build_image(), 0, "MYVOLUME")


def test_find_file_missing():
    with pytest.raises(FileNotFoundError):
        find_file(_build_image(), 0, "NOPE    BIN")


def test_find_file_with_partition_offset():
    assert find_file(_build_image(offset_sectors=4), 4, FILE_NAME) == 3


def test_read_file_follows_chain():
    data = read_file(_build_image(), 0, 3, 4096)
    assert data == b"A" * 512 + b"B" * 100 + bytes(412)


def test_read_file_respects_max_size():
    data = read_file(_build_image(), 0, 3, 600)
    assert data == b"A" * 512 + b"B" * 88


def test_read_file_zero_size_is_empty():
    assert read_file(_build_image(), 0, 3, 0) == b""


def test_read_file_detects_loop():
    with pytest.raises(ValueError):
        read_file(_build_image(fat4=3), 0, 3, 1 << 20)


def test_read_file_rejects_reserved_cluster():
    with pytest.raises(ValueError):
        read_file(_build_image(), 0, 0, 512)
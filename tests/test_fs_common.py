import pytest

from bloodhorn.fs_common import SectorDevice, filename_cmp, path_split


def test_read_sector_returns_slice():
    data = b"a" * 512 + b"b" * 512
    device = SectorDevice(data)
    assert device.read_sector(1) == b"b" * 512


def test_read_sector_pads_short_tail():
    device = SectorDevice(b"abc")
    assert device.read_sector(0) == b"abc" + bytes(509)


def test_read_sectors_concatenates():
    data = bytes(range(256)) * 8
    device = SectorDevice(data)
    assert device.read_sectors(1, 3) == data[512:2048]


def test_read_outside_device_raises():
    device = SectorDevice(bytes(1024))
    with pytest.raises(OSError):
        device.read_sector(2)
    with pytest.raises(OSError):
        device.read_sector(-1)


def test_filename_cmp_ignores_case():
    assert filename_cmp("Kernel.IMG", "kernel.img") == 0


def test_filename_cmp_orders():
    assert filename_cmp("a", "b") < 0
    assert filename_cmp("B", "a") > 0
    assert filename_cmp("abc", "AB") > 0
    assert filename_cmp("ab", "abc") < 0


def test_path_split_with_directory():
    assert path_split("/boot/vmlinuz") == ("/boot", "vmlinuz")


def test_path_split_without_directory():
    assert path_split("vmlinuz") == ("", "vmlinuz")


def test_path_split_root_and_trailing_slash():
    assert path_split("/x") == ("", "x")
    assert path_split("dir/") == ("dir", "")
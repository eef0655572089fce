import pytest

from bloodhorn.net_utils import net_checksum


def test_empty_data_gives_all_ones():
    assert net_checksum(b"") == 0xFFFF


def test_single_word():
    assert net_checksum(b"\x00\x01") == 0xFFFE


def test_appending_checksum_verifies_to_zero():
    data = b"\x45\x00\x00\x1c\x12\x34\xab\xcd"
    checksum = net_checksum(data)
    assert net_checksum(data + checksum.to_bytes(2, "big")) == 0


def test_odd_length_is_zero_padded():
    assert net_checksum(b"\x12\x34\x56") == net_checksum(b"\x12\x34\x56\x00")


@pytest.mark.parametrize("data", [b"\xff" * 64, bytes(range(256)), b"\x01"])
def test_result_fits_sixteen_bits(data):
    value = net_checksum(data)
    assert 0 <= value <= 0xFFFF
    assert net_checksum(data + b"\0" * (len(data) % 2) + value.to_bytes(2, "big")) == 0
import pytest

from bloodhorn.tftp import build_rrq, parse_data, parse_oack


def test_rrq_default_block_size():
    assert build_rrq("pxelinux.0") == b"\x00\x01pxelinux.0\x00octet\x00\x00"


def test_rrq_with_larger_block_size():
    packet = build_rrq("kernel", 1024)
    assert packet.startswith(b"\x00\x01kernel\x00octet\x00")
    assert packet.endswith(b"blksize\x001024\x00\x00")


def test_rrq_ignores_small_block_size():
    assert build_rrq("kernel", 256) == build_rrq("kernel")


def test_parse_data_full_block():
    payload = b"A" * 512
    assert parse_data(b"\x00\x03\x00\x07" + payload) == (7, payload)


def test_parse_data_empty_block():
    block, data = parse_data(b"\x00\x03\x01\x02\x00\x00")
    assert block == 0x0102
    assert data == b""


def test_parse_data_rejects_other_opcodes():
    with pytest.raises(ValueError):
        parse_data(b"\x00\x05\x00\x01error\x00")


def test_parse_oack_reads_blksize():
    assert parse_oack(b"\x00\x06tsize\x00100\x00blksize\x001468\x00") == 1468


def test_parse_oack_without_blksize():
    assert parse_oack(b"\x00\x06tsize\x00100\x00") is None


def test_parse_oack_non_numeric_value():
    assert parse_oack(b"\x00\x06blksize\x00abc\x00") == 0


def test_rrq_options_round_trip_through_oack_parser():
    assert parse_oack(build_rrq("f", 2048)) == 2048
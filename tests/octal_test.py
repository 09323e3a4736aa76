from pytest import mark

from tar_streams.constants import MODELEN, SIZELEN
from tar_streams.octal import (
    LARGE_NUM_MASK,
    OCTAL_MAX,
    get_check_sum_octal_bytes,
    get_octal_bytes,
    parse_octal,
)


@mark.parametrize("value", [0, 1, OCTAL_MAX, OCTAL_MAX + 1, 2 ** 40])
def test_size_field_round_trip(value):
    buf = bytearray(SIZELEN)
    assert get_octal_bytes(value, buf, 0, SIZELEN) == SIZELEN
    assert parse_octal(buf, 0, SIZELEN) == value


@mark.parametrize(
    "value,expected",
    [
        (0, b"00000000000\x00"),
        (5, b"00000000005\x00"),
        (8, b"00000000010\x00"),
        (OCTAL_MAX, b"77777777777\x00"),
    ],
)
def test_octal_digits(value, expected):
    buf = bytearray(SIZELEN)
    get_octal_bytes(value, buf, 0, SIZELEN)
    assert bytes(buf) == expected


@mark.parametrize("value", [OCTAL_MAX + 1, 2 ** 40])
def test_gnu_large_number_layout(value):
    buf = bytearray(SIZELEN)
    get_octal_bytes(value, buf, 0, SIZELEN)
    assert buf[0] == LARGE_NUM_MASK
    assert buf[1:4] == b"\x00\x00\x00"
    assert int.from_bytes(buf[4:], "big") == value


def test_large_number_only_in_size_field():
    """Narrower fields silently keep only as many low digits as fit."""
    buf = bytearray(MODELEN)
    get_octal_bytes(0o123456701, buf, 0, MODELEN)
    assert bytes(buf) == b"3456701\x00"


def test_write_at_offset_leaves_neighbours():
    buf = bytearray(b"\xff" * 20)
    assert get_octal_bytes(0o644, buf, 4, MODELEN) == 4 + MODELEN
    assert buf[:4] == b"\xff" * 4
    assert buf[4:12] == b"0000644\x00"
    assert buf[12:] == b"\xff" * 8
    assert parse_octal(buf, 4, MODELEN) == 0o644


@mark.parametrize(
    "field,expected",
    [
        (b"0000644\x00", 0o644),
        (b"    644 ", 0o644),
        (b"644\x00\x00\x00\x00\x00", 0o644),
        (b"0000000\x00", 0),
        (b"\x00\x00\x00\x00\x00\x00\x00\x00", 0),
        (b"00012 34", 0o12),
        (b"0001\x00777", 1),
    ],
)
def test_parse_padding_and_terminators(field, expected):
    assert parse_octal(field, 0, len(field)) == expected


def test_parse_does_not_validate_digits():
    # '8' accumulates as a digit of value 8
    assert parse_octal(b"18\x00", 0, 3) == 1 * 8 + 8


def test_check_sum_bytes():
    buf = bytearray(8)
    assert get_check_sum_octal_bytes(0o4567, buf, 0, 8) == 8
    assert bytes(buf) == b"004567\x00 "
    assert parse_octal(buf, 0, 8) == 0o4567

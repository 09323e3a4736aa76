r""":mod:`tar_streams.octal` encodes and decodes the fixed-width numeric fields of a
tar header record.

Numbers are written as ASCII octal digits, right-justified with leading zeros and
terminated by a NUL byte, so a field of width ``n`` holds ``n - 1`` digits. A
12-byte field can therefore hold at most :data:`OCTAL_MAX` (``8 ** 11 - 1``). Larger
values (in practice only the ``size`` field) use the GNU extension: the first
byte has its high bit set and the final 8 bytes of the field hold the value as a
big-endian unsigned integer.

    >>> from tar_streams.octal import get_octal_bytes, parse_octal
    >>> buf = bytearray(12)
    >>> get_octal_bytes(5, buf, 0, 12)
    12
    >>> bytes(buf)
    b'00000000005\x00'
    >>> parse_octal(buf, 0, 12)
    5
"""
from __future__ import annotations

import struct

__all__ = [
    "OCTAL_MAX",
    "LARGE_NUM_MASK",
    "parse_octal",
    "get_octal_bytes",
    "get_check_sum_octal_bytes",
]

OCTAL_MAX = 8 ** 11 - 1  # 8589934591
LARGE_NUM_MASK = 0x80
_LARGE_NUM_FIELD = 12
_LARGE_NUM_STRUCT = ">Q"
_ZERO = ord("0")
_SPACE = ord(" ")


def parse_octal(header: bytes | bytearray, offset: int, length: int) -> int:
    """Parse an octal number from ``length`` bytes of ``header`` beginning at
    ``offset``.

    Leading spaces and zeros are padding. Parsing stops at the first NUL, or at the
    first space after the padding. Digits are not range-checked: a malformed field
    still accumulates ``result * 8 + (b - ord("0"))`` for every byte read.

    If the field is 12 bytes wide and its first byte has the high bit set, the
    field uses the GNU large number extension and the 8 bytes at ``offset + 4``
    are returned as a big-endian unsigned integer.

    Args:
      header : the header block
      offset : position of the field within ``header``
      length : width of the field
    """
    if length == _LARGE_NUM_FIELD and header[offset] & LARGE_NUM_MASK:
        (value,) = struct.unpack_from(_LARGE_NUM_STRUCT, header, offset + 4)
        return value
    result = 0
    still_padding = True
    for b in header[offset : offset + length]:
        if b == 0:
            break
        if b == _SPACE or b == _ZERO:
            if still_padding:
                continue
            if b == _SPACE:
                break
        still_padding = False
        result = result * 8 + (b - _ZERO)
    return result


def get_octal_bytes(value: int, buf: bytearray, offset: int, length: int) -> int:
    """Write ``value`` into the ``length`` bytes of ``buf`` at ``offset``.

    Values above :data:`OCTAL_MAX` in a 12-byte field are written with the GNU
    extension (``0x80``, three zero bytes, then 8 big-endian bytes). Otherwise
    ``length - 1`` octal digits are written with leading zeros and the last byte
    of the field is NUL.

    Args:
      value  : the non-negative number to encode
      buf    : the header block being written
      offset : position of the field within ``buf``
      length : width of the field

    Returns:
      The offset just past the field (``offset + length``).
    """
    if value > OCTAL_MAX and length == _LARGE_NUM_FIELD:
        buf[offset : offset + 4] = bytes((LARGE_NUM_MASK, 0, 0, 0))
        struct.pack_into(_LARGE_NUM_STRUCT, buf, offset + 4, value)
        return offset + length
    idx = length - 1
    buf[offset + idx] = 0
    idx -= 1
    val = value
    while idx >= 0:
        buf[offset + idx] = _ZERO + (val & 7)
        val >>= 3
        idx -= 1
    return offset + length


def get_check_sum_octal_bytes(
    value: int, buf: bytearray, offset: int, length: int
) -> int:
    """Write a checksum: octal digits and a NUL in the first ``length - 1`` bytes,
    then a trailing space in the last byte.
    """
    get_octal_bytes(value, buf, offset, length - 1)
    buf[offset + length - 1] = _SPACE
    return offset + length

"""Binary-coded decimal helpers.

A BCD byte holds two decimal digits, high nibble first. Multi-byte values
come in two digit orders:
  little: least-significant digit pair first (frequencies, offsets)
  big: most-significant digit pair first (levels, meters)

Output width is always given by the caller; encoding never autosizes.
"""

from civ.errors import InvalidBcdError


def decode_bcd_byte(byte: int) -> int:
    """Decode one BCD byte into its value (0-99)."""
    high = (byte >> 4) & 0x0F
    low = byte & 0x0F
    if high > 9 or low > 9:
        raise InvalidBcdError(byte)
    return high * 10 + low


def encode_bcd_byte(value: int) -> int:
    """Encode a value (0-99) into one BCD byte."""
    if not 0 <= value <= 99:
        raise InvalidBcdError(value)
    return (value // 10) << 4 | (value % 10)


def decode_bcd_le(data: bytes) -> int:
    """Decode little-endian BCD bytes into an int.

    ``[0x00, 0x50, 0x14]`` reads as pairs 14 50 00, i.e. 145000.
    """
    result = 0
    for byte in reversed(data):
        result = result * 100 + decode_bcd_byte(byte)
    return result


def decode_bcd_be(data: bytes) -> int:
    """Decode big-endian BCD bytes into an int (``[0x01, 0x28]`` -> 128)."""
    result = 0
    for byte in data:
        result = result * 100 + decode_bcd_byte(byte)
    return result


def encode_bcd_le(value: int, length: int) -> bytes:
    """Encode value as exactly ``length`` little-endian BCD bytes."""
    if value < 0:
        raise InvalidBcdError(value)
    out = bytearray()
    remaining = value
    for _ in range(length):
        out.append(encode_bcd_byte(remaining % 100))
        remaining //= 100
    return bytes(out)


def encode_bcd_be(value: int, length: int) -> bytes:
    """Encode value as exactly ``length`` big-endian BCD bytes."""
    return encode_bcd_le(value, length)[::-1]

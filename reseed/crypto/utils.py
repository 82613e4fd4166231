"""
Byte helpers for the entropy pool and counter registry.

Small utilities for wiping secret buffers and encoding integers the way the
reseed inputs expect them.
"""

from typing import Union


def secure_zero(data: Union[bytes, bytearray, memoryview]) -> None:
    """
    Overwrite a secret buffer with zeros.

    Only mutable buffers can be wiped. Immutable ``bytes`` are accepted and
    left alone since Python gives no way to clear them in place; callers that
    care keep secrets in a ``bytearray``.

    Args:
        data: Bytes, bytearray, or memoryview to zero out
    """
    if isinstance(data, (bytearray, memoryview)):
        for i in range(len(data)):
            data[i] = 0
    elif isinstance(data, bytes):
        pass
    else:
        raise TypeError("Data must be bytes, bytearray, or memoryview")


def int_to_bytes(value: int, length: int) -> bytes:
    """
    Convert a non-negative integer to fixed-width big-endian bytes.

    Args:
        value: Integer to convert
        length: Number of bytes in output

    Returns:
        Bytes representation

    Raises:
        ValueError: If value is negative or does not fit in ``length`` bytes
    """
    if value < 0 or value >= 1 << (8 * length):
        raise ValueError(f"Value {value} does not fit in {length} unsigned bytes")
    return value.to_bytes(length, byteorder='big')


def to_signed32(value: int) -> int:
    """Reinterpret the low 32 bits of ``value`` as a two's complement integer."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def format_hex(data: bytes, separator: str = "") -> str:
    """
    Format bytes as lowercase hexadecimal.

    Args:
        data: Bytes to format
        separator: Separator between hex bytes

    Returns:
        Formatted hex string
    """
    return separator.join(f"{b:02x}" for b in data)

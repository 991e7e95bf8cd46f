"""Bit maps stored in byte buffers, least significant bit first."""

from __future__ import annotations

BITMAP_WIDTH = 8


def bitmap_size(bit_num: int) -> int:
    """Number of bytes needed to hold ``bit_num`` bits."""
    return (bit_num + BITMAP_WIDTH - 1) // BITMAP_WIDTH


def set_bit(bitmap: bytearray, bit_idx: int, value: bool) -> None:
    """Set or clear one bit in place."""
    byte, bit = divmod(bit_idx, BITMAP_WIDTH)
    if value:
        bitmap[byte] |= 1 << bit
    else:
        bitmap[byte] &= ~(1 << bit) & 0xFF


def get_bit(bitmap: bytes, bit_idx: int) -> bool:
    """Return whether one bit is set."""
    byte, bit = divmod(bit_idx, BITMAP_WIDTH)
    return bool(bitmap[byte] & (1 << bit))


def clear(bitmap: bytearray, bit_num: int) -> None:
    """Zero every byte that covers the first ``bit_num`` bits."""
    size = bitmap_size(bit_num)
    bitmap[:size] = bytes(size)


def fill(bitmap: bytearray, bit_num: int) -> None:
    """Set every byte that covers the first ``bit_num`` bits to all ones."""
    size = bitmap_size(bit_num)
    bitmap[:size] = b"\xff" * size


def find_first(bitmap: bytes, bit_num: int, start: int, value: bool) -> int:
    """Index of the first bit from ``start`` equal to ``value``, or ``bit_num``."""
    return next((i for i in range(start, bit_num) if get_bit(bitmap, i) == value), bit_num)
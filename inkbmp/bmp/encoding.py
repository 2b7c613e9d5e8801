from __future__ import annotations

from typing import Iterable, List, Sequence

from ..types import Color

INDEXED_BITS = (1, 2, 4, 8)


def row_bytes(width: int, bits_per_pixel: int) -> int:
    """Bytes of pixel data in one row, before padding."""
    return (width * bits_per_pixel + 7) // 8


def row_padding(width: int, bits_per_pixel: int) -> int:
    return (4 - row_bytes(width, bits_per_pixel) % 4) % 4


def row_stride(width: int, bits_per_pixel: int) -> int:
    """Row size in bytes rounded up to a 4-byte boundary."""
    return row_bytes(width, bits_per_pixel) + row_padding(width, bits_per_pixel)


def pack_indices(indices: Sequence[int], bits_per_pixel: int) -> bytes:
    """Pack palette indices MSB-first, ``8 // bits_per_pixel`` per byte.

    A partial trailing byte keeps its unused low bits at zero.
    """
    if bits_per_pixel not in INDEXED_BITS:
        raise ValueError(f"Cannot pack indices at {bits_per_pixel} bits per pixel")
    if bits_per_pixel == 8:
        return bytes(indices)
    per_byte = 8 // bits_per_pixel
    mask = (1 << bits_per_pixel) - 1
    out = bytearray()
    for i in range(0, len(indices), per_byte):
        chunk = indices[i : i + per_byte]
        value = 0
        for slot, index in enumerate(chunk):
            shift = (per_byte - 1 - slot) * bits_per_pixel
            value |= (index & mask) << shift
        out.append(value)
    return bytes(out)


def pack_bgr(colors: Iterable[Color]) -> bytes:
    """Pack RGB tuples as B, G, R byte triplets."""
    out = bytearray()
    for r, g, b in colors:
        out += bytes((b, g, r))
    return bytes(out)


def pad_row(data: bytes, stride: int) -> bytes:
    if len(data) > stride:
        raise ValueError(f"Row of {len(data)} bytes does not fit a stride of {stride}")
    return data + bytes(stride - len(data))


def build_pixel_array(rows: List[bytes], stride: int, bottom_up: bool) -> bytes:
    """Pad top-down ``rows`` to ``stride`` and lay them out in storage order."""
    ordered = reversed(rows) if bottom_up else rows
    out = bytearray()
    for row in ordered:
        out += pad_row(row, stride)
    return bytes(out)

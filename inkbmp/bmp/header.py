from __future__ import annotations

import struct
from typing import Optional

from ..palette import Palette

FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
HEADER_SIZE = FILE_HEADER_SIZE + INFO_HEADER_SIZE
COLOR_ENTRY_SIZE = 4
BI_RGB = 0


def color_table_entries(bits_per_pixel: int) -> int:
    """Number of color table slots written for a depth (0 for truecolor)."""
    if bits_per_pixel >= 24:
        return 0
    return 1 << bits_per_pixel


def pixel_offset(bits_per_pixel: int) -> int:
    return HEADER_SIZE + color_table_entries(bits_per_pixel) * COLOR_ENTRY_SIZE


def file_header(file_size: int, offset: int) -> bytes:
    """Build the 14-byte BITMAPFILEHEADER."""
    return struct.pack("<2sIHHI", b"BM", file_size, 0, 0, offset)


def info_header(
    width: int,
    height: int,
    bits_per_pixel: int,
    image_size: int,
    colors_used: int,
) -> bytes:
    """Build the 40-byte BITMAPINFOHEADER.

    ``height`` is written as given: positive for bottom-up storage, negative
    for top-down storage.
    """
    return struct.pack(
        "<IiiHHIIiiII",
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        bits_per_pixel,
        BI_RGB,
        image_size,
        0,
        0,
        colors_used,
        colors_used,
    )


def color_table(palette: Optional[Palette], bits_per_pixel: int) -> bytes:
    """Build the BGR0 color table, zero-filled past the end of ``palette``."""
    entries = color_table_entries(bits_per_pixel)
    out = bytearray(entries * COLOR_ENTRY_SIZE)
    if palette is None:
        return bytes(out)
    for i, (r, g, b) in enumerate(palette.colors[:entries]):
        offset = i * COLOR_ENTRY_SIZE
        out[offset : offset + COLOR_ENTRY_SIZE] = bytes([b, g, r, 0])
    return bytes(out)

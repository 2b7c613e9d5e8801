from .encoder import (
    ALL_BITS,
    DEFAULT_CONFIG,
    GRAYSCALE_CONFIG,
    SCREENSHOT_CONFIG,
    BmpEncoder,
    EncoderConfig,
    PixelSource,
    RowOrder,
    encode_bmp,
)
from .encoding import pack_bgr, pack_indices, row_bytes, row_padding, row_stride
from .header import HEADER_SIZE, color_table, file_header, info_header, pixel_offset

BMP_CONTENT_TYPE = "image/bmp"

__all__ = [
    "ALL_BITS",
    "BMP_CONTENT_TYPE",
    "BmpEncoder",
    "DEFAULT_CONFIG",
    "EncoderConfig",
    "GRAYSCALE_CONFIG",
    "HEADER_SIZE",
    "PixelSource",
    "RowOrder",
    "SCREENSHOT_CONFIG",
    "color_table",
    "encode_bmp",
    "file_header",
    "info_header",
    "pack_bgr",
    "pack_indices",
    "pixel_offset",
    "row_bytes",
    "row_padding",
    "row_stride",
]

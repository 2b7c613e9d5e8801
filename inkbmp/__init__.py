from .bmp import (
    BMP_CONTENT_TYPE,
    DEFAULT_CONFIG,
    GRAYSCALE_CONFIG,
    SCREENSHOT_CONFIG,
    BmpEncoder,
    EncoderConfig,
    RowOrder,
    encode_bmp,
)
from .dither import KERNELS, DiffusionKernel, DitherAlgorithm, nearest_palette_index, quantize
from .errors import (
    InkBmpError,
    InvalidPalette,
    InvalidPaletteSize,
    InvalidRasterSize,
    PaletteSizeMismatch,
    UnsupportedBitDepth,
)
from .palette import Palette, build_grayscale_palette
from .types import Color, QuantizedRaster, Raster

__all__ = [
    "BMP_CONTENT_TYPE",
    "BmpEncoder",
    "Color",
    "DEFAULT_CONFIG",
    "DiffusionKernel",
    "DitherAlgorithm",
    "EncoderConfig",
    "GRAYSCALE_CONFIG",
    "InkBmpError",
    "InvalidPalette",
    "InvalidPaletteSize",
    "InvalidRasterSize",
    "KERNELS",
    "Palette",
    "PaletteSizeMismatch",
    "QuantizedRaster",
    "Raster",
    "RowOrder",
    "SCREENSHOT_CONFIG",
    "UnsupportedBitDepth",
    "build_grayscale_palette",
    "encode_bmp",
    "nearest_palette_index",
    "quantize",
]

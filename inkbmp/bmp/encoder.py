from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union

from ..dither.quantizer import nearest_palette_index
from ..errors import InvalidRasterSize, PaletteSizeMismatch, UnsupportedBitDepth
from ..palette import Palette
from ..types import Color, QuantizedRaster, Raster
from .encoding import build_pixel_array, pack_bgr, pack_indices, row_stride
from .header import color_table, color_table_entries, file_header, info_header, pixel_offset

ALL_BITS: FrozenSet[int] = frozenset({1, 2, 4, 8, 24})

PixelSource = Union[Raster, QuantizedRaster]


class RowOrder(Enum):
    BOTTOM_UP = "bottom-up"
    TOP_DOWN = "top-down"


@dataclass(frozen=True)
class EncoderConfig:
    """Deployment choices for the BMP encoder.

    ``row_order`` decides the sign of the stored height; ``supported_bits``
    narrows the accepted depths.
    """

    row_order: RowOrder = RowOrder.BOTTOM_UP
    supported_bits: FrozenSet[int] = field(default=ALL_BITS)


DEFAULT_CONFIG = EncoderConfig()
SCREENSHOT_CONFIG = EncoderConfig(RowOrder.BOTTOM_UP, frozenset({1, 2, 4, 24}))
GRAYSCALE_CONFIG = EncoderConfig(RowOrder.TOP_DOWN, frozenset({1, 8, 24}))


class BmpEncoder:
    def __init__(
        self,
        width: int,
        height: int,
        bits_per_pixel: int,
        palette: Optional[Palette] = None,
        config: EncoderConfig = DEFAULT_CONFIG,
    ) -> None:
        if bits_per_pixel not in ALL_BITS or bits_per_pixel not in config.supported_bits:
            supported = ", ".join(str(b) for b in sorted(config.supported_bits & ALL_BITS))
            raise UnsupportedBitDepth(
                f"Unsupported bits per pixel: {bits_per_pixel}. Supported values are: {supported}"
            )
        if bits_per_pixel < 24:
            max_colors = 1 << bits_per_pixel
            if palette is None or len(palette) == 0:
                raise PaletteSizeMismatch(f"Palette is required for {bits_per_pixel}-bit BMP")
            if len(palette) > max_colors:
                raise PaletteSizeMismatch(
                    f"Palette has {len(palette)} colors but {bits_per_pixel}-bit BMP "
                    f"supports maximum {max_colors} colors"
                )
        if width <= 0 or height <= 0:
            raise InvalidRasterSize(f"BMP size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.bits_per_pixel = bits_per_pixel
        self.palette = palette
        self.config = config
        self.stride = row_stride(width, bits_per_pixel)

    @property
    def bottom_up(self) -> bool:
        return self.config.row_order is RowOrder.BOTTOM_UP

    @property
    def header_size(self) -> int:
        return pixel_offset(self.bits_per_pixel)

    @property
    def image_size(self) -> int:
        return self.stride * self.height

    @property
    def file_size(self) -> int:
        return self.header_size + self.image_size

    def encode(self, source: PixelSource) -> bytes:
        """Return the complete BMP file for ``source``."""
        rows = self._packed_rows(source)
        pixel_data = build_pixel_array(rows, self.stride, self.bottom_up)
        return self.create_header() + pixel_data

    def create_header(self) -> bytes:
        stored_height = self.height if self.bottom_up else -self.height
        header = bytearray()
        header += file_header(self.file_size, self.header_size)
        header += info_header(
            self.width,
            stored_height,
            self.bits_per_pixel,
            self.image_size,
            color_table_entries(self.bits_per_pixel),
        )
        if self.bits_per_pixel < 24:
            header += color_table(self.palette, self.bits_per_pixel)
        return bytes(header)

    def _packed_rows(self, source: PixelSource) -> List[bytes]:
        self._check_source(source)
        if self.bits_per_pixel == 24:
            return [pack_bgr(row) for row in self._color_rows(source)]
        return [pack_indices(row, self.bits_per_pixel) for row in self._index_rows(source)]

    def _check_source(self, source: PixelSource) -> None:
        raster = source.raster if isinstance(source, QuantizedRaster) else source
        raster.validate()
        if raster.width != self.width or raster.height != self.height:
            raise InvalidRasterSize(
                f"Pixel source is {raster.width}x{raster.height}, encoder expects {self.width}x{self.height}"
            )
        if isinstance(source, QuantizedRaster):
            if len(source.indices) != self.width * self.height:
                raise InvalidRasterSize(
                    f"Quantized raster has {len(source.indices)} indices, expected {self.width * self.height}"
                )
            if self.palette is not None:
                limit = len(self.palette)
                if any(index < 0 or index >= limit for index in source.indices):
                    raise PaletteSizeMismatch(f"Quantized raster references colors beyond the {limit}-entry palette")

    def _index_rows(self, source: PixelSource) -> List[List[int]]:
        if isinstance(source, QuantizedRaster):
            return list(source.index_rows())
        # Fallback for unquantized input: same nearest-color rule as the quantizer.
        colors = self.palette.colors
        cache: Dict[Color, int] = {}
        rows = []
        for row in source.iter_rows():
            out = []
            for rgb in row:
                index = cache.get(rgb)
                if index is None:
                    index = nearest_palette_index(rgb, colors)
                    cache[rgb] = index
                out.append(index)
            rows.append(out)
        return rows

    def _color_rows(self, source: PixelSource) -> List[List[Color]]:
        if isinstance(source, QuantizedRaster):
            if self.palette is None:
                return list(source.raster.iter_rows())
            colors = self.palette.colors
            return [[colors[index] for index in row] for row in source.index_rows()]
        return list(source.iter_rows())


def encode_bmp(
    width: int,
    height: int,
    bits_per_pixel: int,
    source: PixelSource,
    palette: Optional[Palette] = None,
    config: EncoderConfig = DEFAULT_CONFIG,
) -> bytes:
    """Encode ``source`` as a BMP file in one call."""
    return BmpEncoder(width, height, bits_per_pixel, palette, config).encode(source)

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Tuple

from .errors import InvalidRasterSize

if TYPE_CHECKING:
    from .palette import Palette

Color = Tuple[int, int, int]

SUPPORTED_CHANNELS = (1, 3, 4)


@dataclass(frozen=True)
class Raster:
    """Row-major, top-down pixel buffer with 8 bits per channel.

    ``channels`` is 3 (RGB) or 4 (RGBA). Single channel grayscale data is
    accepted as well and reads back as ``(v, v, v)``.
    """

    pixels: bytes
    width: int
    height: int
    channels: int = 3

    def validate(self) -> None:
        """Check that the buffer length matches the declared geometry."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidRasterSize(f"Raster size must be positive, got {self.width}x{self.height}")
        if self.channels not in SUPPORTED_CHANNELS:
            raise InvalidRasterSize(f"Unsupported channel count: {self.channels}")
        expected = self.width * self.height * self.channels
        if len(self.pixels) != expected:
            raise InvalidRasterSize(
                f"Raster buffer has {len(self.pixels)} bytes, expected {expected} "
                f"({self.width}x{self.height}x{self.channels})"
            )

    @property
    def has_alpha(self) -> bool:
        return self.channels == 4

    def pixel(self, x: int, y: int) -> Color:
        """Return the RGB value at ``(x, y)``."""
        idx = (y * self.width + x) * self.channels
        if self.channels == 1:
            value = self.pixels[idx]
            return (value, value, value)
        return (self.pixels[idx], self.pixels[idx + 1], self.pixels[idx + 2])

    def iter_rows(self) -> Iterator[List[Color]]:
        """Yield each row, top to bottom, as a list of RGB tuples."""
        for y in range(self.height):
            yield [self.pixel(x, y) for x in range(self.width)]


@dataclass(frozen=True)
class QuantizedRaster:
    """Result of palette quantization.

    ``raster`` is a copy of the input with every pixel replaced by its palette
    color; ``indices`` holds the matching palette index per pixel.
    """

    raster: Raster
    indices: List[int]
    palette: "Palette"

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height

    def index_rows(self) -> Iterator[List[int]]:
        """Yield palette indices row by row, top to bottom."""
        width = self.raster.width
        for y in range(self.raster.height):
            yield self.indices[y * width : (y + 1) * width]

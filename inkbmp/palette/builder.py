from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple, Union, overload

from ..errors import InvalidPalette, InvalidPaletteSize
from ..types import Color

_HEX_DIGITS = "0123456789abcdefABCDEF"


@dataclass(frozen=True)
class Palette:
    """Ordered color table. The position of a color is its on-disk index."""

    colors: Tuple[Color, ...]

    @classmethod
    def of(cls, colors: Iterable[Sequence[int]]) -> "Palette":
        """Build a palette from RGB triples, keeping order and duplicates."""
        out: List[Color] = []
        for color in colors:
            if len(color) != 3:
                raise InvalidPalette(f"Palette colors must have three components, got {tuple(color)!r}")
            r, g, b = (int(c) for c in color)
            if any(not (0 <= v <= 255) for v in (r, g, b)):
                raise InvalidPalette(f"Palette color out of range: {(r, g, b)!r}")
            out.append((r, g, b))
        return cls(tuple(out))

    @classmethod
    def from_hex(cls, values: Iterable[str]) -> "Palette":
        return cls(tuple(parse_hex_color(value) for value in values))

    def validate(self) -> None:
        if not self.colors:
            raise InvalidPalette("Palette must contain at least one color")

    def to_hex(self) -> List[str]:
        return [f"#{r:02x}{g:02x}{b:02x}" for r, g, b in self.colors]

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    @overload
    def __getitem__(self, index: int) -> Color: ...

    @overload
    def __getitem__(self, index: slice) -> Tuple[Color, ...]: ...

    def __getitem__(self, index: Union[int, slice]):
        return self.colors[index]


def parse_hex_color(text: str) -> Color:
    """Parse ``#rrggbb`` (or ``rrggbb``) into an RGB tuple."""
    value = text.strip()
    if value.startswith("#"):
        value = value[1:]
    if len(value) != 6 or not all(c in _HEX_DIGITS for c in value):
        raise InvalidPalette(f"Invalid hex color: {text!r}")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_grayscale_palette(n: int) -> Palette:
    """Return an n-stop gray ramp from black to white.

    Stop ``i`` has the value ``round(i / (n - 1) * 255)`` on every channel,
    halves rounding up. A single stop is black.
    """
    if n < 1:
        raise InvalidPaletteSize(f"Grayscale palette needs at least one stop, got {n}")
    if n == 1:
        return Palette(((0, 0, 0),))
    stops = []
    for i in range(n):
        value = _round_half_up(i / (n - 1) * 255)
        stops.append((value, value, value))
    return Palette(tuple(stops))

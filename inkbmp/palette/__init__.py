from .builder import Palette, build_grayscale_palette, parse_hex_color
from .displays import DisplayPalette, DisplayPaletteRegistry

__all__ = [
    "DisplayPalette",
    "DisplayPaletteRegistry",
    "Palette",
    "build_grayscale_palette",
    "parse_hex_color",
]

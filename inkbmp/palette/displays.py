from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .builder import Palette

DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "display_palettes.json"


@dataclass(frozen=True)
class DisplayPalette:
    """Fixed palette of a color e-paper panel.

    ``colors`` are what the panel actually looks like and are used for
    dithering. ``device_colors``, when present, are the values the panel
    controller expects and end up in the BMP color table at the same indices.
    """

    name: str
    colors: List[str]
    device_colors: Optional[List[str]] = None
    description: str = ""

    @property
    def dither_palette(self) -> Palette:
        return Palette.from_hex(self.colors)

    @property
    def output_palette(self) -> Palette:
        if not self.device_colors:
            return self.dither_palette
        if len(self.device_colors) != len(self.colors):
            raise RuntimeError(
                f"Display palette '{self.name}' has {len(self.colors)} colors "
                f"but {len(self.device_colors)} device colors"
            )
        return Palette.from_hex(self.device_colors)


class DisplayPaletteRegistry:
    def __init__(self, palettes: Iterable[DisplayPalette]) -> None:
        self._palettes = list(palettes)

    @classmethod
    def load(cls, path: Path = DATA_PATH) -> "DisplayPaletteRegistry":
        raw = json.loads(path.read_text(encoding="utf-8"))
        return cls(DisplayPalette(**item) for item in raw)

    @property
    def names(self) -> List[str]:
        return [palette.name for palette in self._palettes]

    @property
    def palettes(self) -> List[DisplayPalette]:
        return list(self._palettes)

    def get(self, name: str) -> Optional[DisplayPalette]:
        name_lower = name.lower()
        for palette in self._palettes:
            if palette.name.lower() == name_lower:
                return palette
        return None

    def require(self, name: str) -> DisplayPalette:
        palette = self.get(name)
        if not palette:
            raise RuntimeError(f"Unknown display palette '{name}' (known: {', '.join(self.names)})")
        return palette

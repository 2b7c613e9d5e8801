from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..errors import InvalidPalette
from ..palette import Palette
from ..types import Color, QuantizedRaster, Raster
from .kernels import KERNELS, DitherAlgorithm

Weights = Sequence[Tuple[int, int, float]]


def nearest_palette_index(rgb: Color, palette: Sequence[Color]) -> int:
    """Return the index of the palette entry closest to ``rgb``.

    Entries are scanned in palette order and only a strictly smaller distance
    replaces the current best, so the lowest index wins ties.
    """
    if not palette:
        raise InvalidPalette("Cannot map colors onto an empty palette")
    r, g, b = rgb
    best_idx = 0
    best_dist = -1
    for i, (pr, pg, pb) in enumerate(palette):
        dist = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2
        if best_dist < 0 or dist < best_dist:
            best_idx = i
            best_dist = dist
    return best_idx


def diffuse_error(
    work: bytearray,
    width: int,
    height: int,
    channels: int,
    x: int,
    y: int,
    error: Tuple[int, int, int],
    weights: Weights,
) -> None:
    """Add weighted RGB error to the neighbors of ``(x, y)``.

    Neighbors outside the raster are skipped. Each channel is clamped to
    0..255 and stored as an 8-bit value; alpha is left alone.
    """
    err_r, err_g, err_b = error
    for dx, dy, fraction in weights:
        nx = x + dx
        ny = y + dy
        if 0 <= nx < width and 0 <= ny < height:
            idx = (ny * width + nx) * channels
            work[idx] = _clamp(work[idx] + err_r * fraction)
            work[idx + 1] = _clamp(work[idx + 1] + err_g * fraction)
            work[idx + 2] = _clamp(work[idx + 2] + err_b * fraction)


def quantize(
    raster: Raster,
    palette: Palette,
    algorithm: DitherAlgorithm = DitherAlgorithm.NONE,
) -> QuantizedRaster:
    """Map every pixel of ``raster`` onto ``palette``.

    Works on a private copy, so the caller's buffer is never modified.
    Grayscale input is widened to RGB because palette colors need three
    channels. Pixels are visited row by row, left to right, and the kernel
    of ``algorithm`` spreads each pixel's quantization error over the pixels
    not visited yet.
    """
    palette.validate()
    raster.validate()
    weights = KERNELS[algorithm].weights()

    work, channels = _working_copy(raster)
    width = raster.width
    height = raster.height
    colors = palette.colors
    indices: List[int] = [0] * (width * height)
    cache: Dict[Color, int] = {}

    for y in range(height):
        row = y * width
        for x in range(width):
            idx = (row + x) * channels
            old = (work[idx], work[idx + 1], work[idx + 2])
            index = cache.get(old)
            if index is None:
                index = nearest_palette_index(old, colors)
                cache[old] = index
            indices[row + x] = index

            new = colors[index]
            work[idx] = new[0]
            work[idx + 1] = new[1]
            work[idx + 2] = new[2]

            if not weights:
                continue
            error = (old[0] - new[0], old[1] - new[1], old[2] - new[2])
            if error == (0, 0, 0):
                continue
            diffuse_error(work, width, height, channels, x, y, error, weights)

    quantized = Raster(bytes(work), width, height, channels)
    return QuantizedRaster(raster=quantized, indices=indices, palette=palette)


def _working_copy(raster: Raster) -> Tuple[bytearray, int]:
    if raster.channels != 1:
        return bytearray(raster.pixels), raster.channels
    work = bytearray(len(raster.pixels) * 3)
    work[0::3] = raster.pixels
    work[1::3] = raster.pixels
    work[2::3] = raster.pixels
    return work, 3


def _clamp(value: float) -> int:
    if value <= 0:
        return 0
    if value >= 255:
        return 255
    return int(value)

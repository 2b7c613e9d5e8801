from __future__ import annotations

from PIL import Image, ImageOps

from ..types import Raster

DEFAULT_THRESHOLD = 220

_MODE_CHANNELS = {"L": 1, "RGB": 3, "RGBA": 4}
_CHANNEL_MODES = {channels: mode for mode, channels in _MODE_CHANNELS.items()}
# Clockwise angles; Pillow's ROTATE_* constants turn counter-clockwise.
_ROTATIONS = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def load_image(path: str) -> Image.Image:
    """Decode ``path`` and apply its EXIF orientation tag."""
    with Image.open(path) as src:
        oriented = ImageOps.exif_transpose(src)
        oriented.load()
    return oriented


def normalize_image(img: Image.Image) -> Image.Image:
    if img.mode in _MODE_CHANNELS:
        return img
    if img.mode in ("LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        return img.convert("RGBA")
    return img.convert("RGB")


def rotate_image(img: Image.Image, degrees: int) -> Image.Image:
    """Rotate clockwise by a multiple of 90 degrees, growing the canvas to fit."""
    degrees %= 360
    if degrees == 0:
        return img
    transpose = _ROTATIONS.get(degrees)
    if transpose is None:
        raise ValueError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
    return img.transpose(transpose)


def resize_to_fit(img: Image.Image, width: int, height: int) -> Image.Image:
    """Scale and pad ``img`` to exactly ``width`` x ``height``, keeping aspect."""
    if img.size == (width, height):
        return img
    return ImageOps.pad(img, (width, height), method=Image.LANCZOS, color=_white(img))


def apply_threshold(img: Image.Image, level: int = DEFAULT_THRESHOLD) -> Image.Image:
    """Convert to grayscale and binarize; values at or above ``level`` turn white."""
    if not (0 <= level <= 255):
        raise ValueError(f"Threshold must be between 0 and 255, got {level}")
    gray = img.convert("L")
    return gray.point([255 if value >= level else 0 for value in range(256)])


def invert_image(img: Image.Image) -> Image.Image:
    """Negate the color channels, leaving alpha untouched."""
    if img.mode == "RGBA":
        r, g, b, a = img.split()
        rgb = ImageOps.invert(Image.merge("RGB", (r, g, b)))
        return Image.merge("RGBA", (*rgb.split(), a))
    return ImageOps.invert(normalize_image(img))


def image_to_raster(img: Image.Image) -> Raster:
    img = normalize_image(img)
    raster = Raster(img.tobytes(), img.width, img.height, _MODE_CHANNELS[img.mode])
    raster.validate()
    return raster


def raster_to_image(raster: Raster) -> Image.Image:
    raster.validate()
    return Image.frombytes(_CHANNEL_MODES[raster.channels], (raster.width, raster.height), raster.pixels)


def _white(img: Image.Image):
    if img.mode == "L":
        return 255
    if img.mode == "RGBA":
        return (255, 255, 255, 255)
    return (255, 255, 255)

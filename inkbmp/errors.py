from __future__ import annotations


class InkBmpError(ValueError):
    """Base class for validation errors raised while preparing an image."""


class UnsupportedBitDepth(InkBmpError):
    pass


class PaletteSizeMismatch(InkBmpError):
    pass


class InvalidPalette(InkBmpError):
    pass


class InvalidPaletteSize(InkBmpError):
    pass


class InvalidRasterSize(InkBmpError):
    pass

from __future__ import annotations

import io
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .bmp import BMP_CONTENT_TYPE, DEFAULT_CONFIG, BmpEncoder, EncoderConfig, RowOrder
from .devices import DeviceProfile
from .dither import DitherAlgorithm, quantize
from .palette import DisplayPaletteRegistry, Palette, build_grayscale_palette
from .rendering import (
    apply_threshold,
    image_to_raster,
    invert_image,
    load_image,
    normalize_image,
    raster_to_image,
    resize_to_fit,
    rotate_image,
)
from .types import QuantizedRaster, Raster

DEFAULT_DITHERING = DitherAlgorithm.ATKINSON
# Decoded by Pillow; .bmp is accepted as input even though this package only writes it.
INPUT_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp"}
OUTPUT_FORMATS = {
    "bmp": BMP_CONTENT_TYPE,
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}
MAX_INDEXED_COLORS = 256


@dataclass
class PrepareSettings:
    bits_per_pixel: Optional[int] = None
    colors: Optional[List[str]] = None
    gray_levels: Optional[int] = None
    display: Optional[str] = None
    dithering: DitherAlgorithm = DEFAULT_DITHERING
    rotate: int = 0
    threshold: Optional[int] = None
    invert: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    row_order: Optional[RowOrder] = None
    format: str = "bmp"

    @classmethod
    def from_device(cls, device: DeviceProfile) -> "PrepareSettings":
        return cls(
            bits_per_pixel=device.bits_per_pixel,
            gray_levels=device.gray_levels,
            display=device.display,
            dithering=DitherAlgorithm.parse(device.dithering),
            rotate=device.rotate,
            invert=device.invert,
            width=device.width,
            height=device.height,
            row_order=RowOrder(device.row_order),
        )


@dataclass(frozen=True)
class PaletteChoice:
    """Palette to dither against and palette to write out, index for index."""

    dither: Palette
    output: Palette


@dataclass(frozen=True)
class EncodedImage:
    data: bytes
    content_type: str
    width: int
    height: int
    bits_per_pixel: Optional[int] = None
    palette_size: int = 0
    elapsed_ms: int = 0


class ImagePipeline:
    def __init__(
        self,
        settings: Optional[PrepareSettings] = None,
        displays: Optional[DisplayPaletteRegistry] = None,
        config: EncoderConfig = DEFAULT_CONFIG,
    ) -> None:
        self.settings = settings or PrepareSettings()
        self.displays = displays
        self.config = config

    def process_file(self, path: str) -> EncodedImage:
        self._check_input_path(path)
        return self.process(load_image(path))

    def process(self, image: Image.Image) -> EncodedImage:
        start = time.monotonic()
        output_format = self._output_format()
        choice = self.resolve_palette()
        encoder = None
        raster = image_to_raster(self.prepare_image(image))
        if output_format == "bmp":
            encoder = BmpEncoder(
                raster.width,
                raster.height,
                self.resolve_bits_per_pixel(choice),
                choice.output if choice else None,
                self.encoder_config(),
            )

        quantized = None
        if choice is not None:
            quantized = quantize(raster, choice.dither, self.settings.dithering)
        if self.settings.threshold is not None or self.settings.invert:
            raster, quantized = self.finish_image(raster, quantized, choice)

        if encoder is not None:
            data = encoder.encode(quantized if quantized is not None else raster)
        else:
            data = self._encode_with_pillow(raster, quantized, choice, output_format)
        return EncodedImage(
            data=data,
            content_type=OUTPUT_FORMATS[output_format],
            width=raster.width,
            height=raster.height,
            bits_per_pixel=encoder.bits_per_pixel if encoder else None,
            palette_size=len(choice.output) if choice else 0,
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Rotate and fit ``image`` to the target size before quantizing."""
        image = normalize_image(image)
        if self.settings.rotate:
            image = rotate_image(image, self.settings.rotate)
        if self.settings.width and self.settings.height:
            image = resize_to_fit(image, self.settings.width, self.settings.height)
        return image

    def finish_image(
        self,
        raster: Raster,
        quantized: Optional[QuantizedRaster],
        choice: Optional[PaletteChoice],
    ) -> Tuple[Raster, Optional[QuantizedRaster]]:
        """Threshold and invert the dithered pixels.

        The result is mapped back onto the dither palette without diffusion,
        so indices and color table stay in step.
        """
        image = raster_to_image(quantized.raster if quantized is not None else raster)
        if self.settings.threshold is not None:
            image = apply_threshold(image, self.settings.threshold)
        if self.settings.invert:
            image = invert_image(image)
        finished = image_to_raster(image)
        if choice is None:
            return finished, None
        return finished, quantize(finished, choice.dither)

    def resolve_palette(self) -> Optional[PaletteChoice]:
        settings = self.settings
        if settings.colors:
            palette = Palette.from_hex(settings.colors)
            return PaletteChoice(palette, palette)
        if settings.display:
            display = self._display_registry().require(settings.display)
            return PaletteChoice(display.dither_palette, display.output_palette)
        if settings.gray_levels:
            palette = build_grayscale_palette(settings.gray_levels)
            return PaletteChoice(palette, palette)
        bits = settings.bits_per_pixel
        if bits is not None and bits < 24 and self._output_format() == "bmp":
            palette = build_grayscale_palette(min(1 << bits, MAX_INDEXED_COLORS))
            return PaletteChoice(palette, palette)
        return None

    def resolve_bits_per_pixel(self, choice: Optional[PaletteChoice]) -> int:
        """Pick the explicit depth, else the smallest indexed depth holding the palette."""
        if self.settings.bits_per_pixel is not None:
            return self.settings.bits_per_pixel
        if choice is None:
            return 24
        for bits in sorted(self.config.supported_bits):
            if bits < 24 and (1 << bits) >= len(choice.output):
                return bits
        return 24

    def encoder_config(self) -> EncoderConfig:
        if self.settings.row_order is None or self.settings.row_order is self.config.row_order:
            return self.config
        return replace(self.config, row_order=self.settings.row_order)

    def _encode_with_pillow(
        self,
        raster: Raster,
        quantized: Optional[QuantizedRaster],
        choice: Optional[PaletteChoice],
        output_format: str,
    ) -> bytes:
        if quantized is not None and choice is not None:
            if choice.output == choice.dither:
                raster = quantized.raster
            else:
                colors = choice.output.colors
                pixels = bytearray()
                for index in quantized.indices:
                    pixels += bytes(colors[index])
                raster = Raster(bytes(pixels), raster.width, raster.height, 3)
        image = raster_to_image(raster)
        if output_format == "jpeg" and image.mode == "RGBA":
            image = image.convert("RGB")
        buf = io.BytesIO()
        image.save(buf, format=output_format.upper())
        return buf.getvalue()

    def _display_registry(self) -> DisplayPaletteRegistry:
        if self.displays is None:
            self.displays = DisplayPaletteRegistry.load()
        return self.displays

    def _output_format(self) -> str:
        output_format = self.settings.format.lower()
        if output_format == "jpg":
            output_format = "jpeg"
        if output_format not in OUTPUT_FORMATS:
            raise ValueError("Supported output formats: " + ", ".join(sorted(OUTPUT_FORMATS)))
        return output_format

    @staticmethod
    def _check_input_path(path: str) -> None:
        source = Path(path)
        if source.suffix.lower() not in INPUT_EXTENSIONS:
            expected = ", ".join(sorted(INPUT_EXTENSIONS))
            raise ValueError(f"Cannot read '{source.name}': expected one of {expected}")
        if not source.is_file():
            raise FileNotFoundError(f"File not found: {path}")

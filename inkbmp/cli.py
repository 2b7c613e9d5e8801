from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .bmp import DEFAULT_CONFIG, GRAYSCALE_CONFIG, SCREENSHOT_CONFIG, EncoderConfig, RowOrder
from .devices import DeviceRegistry
from .dither import KERNELS, DitherAlgorithm
from .palette import DisplayPaletteRegistry
from .pipeline import OUTPUT_FORMATS, EncodedImage, ImagePipeline, PrepareSettings

ENCODER_PRESETS = {
    "default": DEFAULT_CONFIG,
    "screenshot": SCREENSHOT_CONFIG,
    "grayscale": GRAYSCALE_CONFIG,
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="inkbmp: reduce page screenshots to e-paper palettes and write BMP files."
    )
    parser.add_argument("path", nargs="?", help="Image to convert (.png/.jpg/.gif/.bmp/.webp)")
    parser.add_argument("-o", "--output", help="Output file path")
    parser.add_argument("--device", help="Device profile supplying defaults (see --list-devices)")
    parser.add_argument("--bpp", type=int, choices=(1, 2, 4, 8, 24), help="BMP bits per pixel")
    parser.add_argument("--colors", help="Comma separated hex palette, e.g. '#000000,#ffffff'")
    parser.add_argument("--gray-levels", type=int, metavar="N", help="Use an N-stop grayscale palette")
    parser.add_argument("--display", help="Named display palette (see --list-displays)")
    parser.add_argument("--dither", metavar="ALGORITHM", help="Dithering algorithm (see --list-algorithms)")
    parser.add_argument("--rotate", type=int, choices=(0, 90, 180, 270), help="Rotate clockwise by this many degrees")
    parser.add_argument("--threshold", type=int, metavar="LEVEL", help="Binarize at LEVEL before quantizing")
    parser.add_argument("--invert", action="store_true", help="Invert colors before quantizing")
    parser.add_argument("--row-order", choices=[order.value for order in RowOrder], help="BMP row order")
    parser.add_argument(
        "--encoder",
        choices=sorted(ENCODER_PRESETS),
        default="default",
        help="Encoder preset: supported depths and default row order",
    )
    parser.add_argument("--format", choices=sorted(OUTPUT_FORMATS), help="Output format (default: bmp)")
    parser.add_argument("--list-devices", action="store_true", help="List known device profiles and exit")
    parser.add_argument("--list-displays", action="store_true", help="List named display palettes and exit")
    parser.add_argument("--list-algorithms", action="store_true", help="List dithering algorithms and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report pipeline details on stderr")
    return parser.parse_args(argv)


def list_devices() -> int:
    registry = DeviceRegistry.load()
    aliases = registry.aliases
    for device in registry.devices:
        names = [alias for alias, target in aliases.items() if target == device.name]
        suffix = f" (aliases: {', '.join(names)})" if names else ""
        print(f"{device.name}: {device.size}, {device.bits_per_pixel} bpp{suffix}")
    return 0


def list_displays() -> int:
    registry = DisplayPaletteRegistry.load()
    for palette in registry.palettes:
        print(f"{palette.name}: {len(palette.colors)} colors")
    return 0


def list_algorithms() -> int:
    for algorithm in DitherAlgorithm:
        kernel = KERNELS[algorithm]
        print(f"{algorithm.value} ({len(kernel.taps)} taps, {kernel.total:.4g} of the error)")
    return 0


def build_settings(args: argparse.Namespace) -> PrepareSettings:
    if args.device:
        settings = PrepareSettings.from_device(DeviceRegistry.load().require(args.device))
    else:
        settings = PrepareSettings()
    if args.colors:
        settings.colors = _split_colors(args.colors)
        settings.display = None
        settings.gray_levels = None
    elif args.display:
        settings.display = args.display
        settings.gray_levels = None
    elif args.gray_levels is not None:
        settings.gray_levels = args.gray_levels
        settings.display = None
    if args.bpp is not None:
        settings.bits_per_pixel = args.bpp
    if args.dither:
        settings.dithering = DitherAlgorithm.parse(args.dither)
    if args.rotate is not None:
        settings.rotate = args.rotate
    if args.threshold is not None:
        settings.threshold = args.threshold
    if args.invert:
        settings.invert = True
    if args.row_order:
        settings.row_order = RowOrder(args.row_order)
    if args.format:
        settings.format = args.format
    return settings


def convert(args: argparse.Namespace) -> int:
    settings = build_settings(args)
    config: EncoderConfig = ENCODER_PRESETS[args.encoder]
    pipeline = ImagePipeline(settings, config=config)
    result = pipeline.process_file(args.path)
    with open(args.output, "wb") as handle:
        handle.write(result.data)
    if args.verbose:
        _report(args, settings, result)
    return 0


def _report(args: argparse.Namespace, settings: PrepareSettings, result: EncodedImage) -> None:
    depth = f"{result.bits_per_pixel} bpp" if result.bits_per_pixel else result.content_type
    palette = f"{result.palette_size} colors" if result.palette_size else "no palette"
    print(f"{args.path}: {result.width}x{result.height}, {palette}, dither={settings.dithering.value}", file=sys.stderr)
    print(f"{args.output}: {depth}, {len(result.data)} bytes in {result.elapsed_ms} ms", file=sys.stderr)


def _split_colors(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.list_devices:
        return list_devices()
    if args.list_displays:
        return list_displays()
    if args.list_algorithms:
        return list_algorithms()
    if not args.path:
        print("Missing input path. Use --help for usage.", file=sys.stderr)
        return 2
    if not args.output:
        print("Missing output path (-o/--output). Use --help for usage.", file=sys.stderr)
        return 2
    try:
        return convert(args)
    except Exception as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

#!/usr/bin/env python3
import argparse
from pathlib import Path

from inkbmp import GRAYSCALE_CONFIG, Palette, Raster, build_grayscale_palette, encode_bmp

OUT = Path(__file__).resolve().parents[1] / "samples"


def gradient_raster(width: int = 256, height: int = 64) -> Raster:
    data = bytearray(width * height)
    for y in range(height):
        for x in range(width):
            data[y * width + x] = x & 0xFF
    return Raster(bytes(data), width, height, channels=1)


def checkerboard_raster(width: int = 128, height: int = 128, cell: int = 16) -> Raster:
    data = bytearray(width * height)
    for y in range(height):
        for x in range(width):
            data[y * width + x] = 0xFF if ((x // cell) + (y // cell)) % 2 else 0x00
    return Raster(bytes(data), width, height, channels=1)


def write(path: Path, data: bytes) -> None:
    path.write_bytes(data)
    print(f"Wrote {path} ({len(data)} bytes)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Write sample BMP files")
    parser.add_argument("--out", type=Path, default=OUT, help="Output directory")
    args = parser.parse_args()
    args.out.mkdir(parents=True, exist_ok=True)

    gray = gradient_raster()
    write(
        args.out / "out_gray.bmp",
        encode_bmp(gray.width, gray.height, 8, gray, build_grayscale_palette(256), GRAYSCALE_CONFIG),
    )

    binary = checkerboard_raster()
    write(
        args.out / "out_binary.bmp",
        encode_bmp(binary.width, binary.height, 1, binary, Palette.of([(0, 0, 0), (255, 255, 255)]), GRAYSCALE_CONFIG),
    )


if __name__ == "__main__":
    main()

import io
import struct

import pytest
from PIL import Image

from inkbmp.bmp import GRAYSCALE_CONFIG, SCREENSHOT_CONFIG, RowOrder
from inkbmp.dither import DitherAlgorithm
from inkbmp.errors import PaletteSizeMismatch, UnsupportedBitDepth
from inkbmp.pipeline import ImagePipeline, PrepareSettings


def _split_image(width: int = 10, height: int = 4) -> Image.Image:
    img = Image.new("RGB", (width, height), (255, 255, 255))
    img.paste((0, 0, 0), (0, 0, width // 2, height))
    return img


def _bmp_header(data: bytes):
    offset = struct.unpack_from("<I", data, 10)[0]
    width, height = struct.unpack_from("<ii", data, 18)
    bpp = struct.unpack_from("<H", data, 28)[0]
    return offset, width, height, bpp


def _decode(data: bytes) -> Image.Image:
    with Image.open(io.BytesIO(data)) as img:
        return img.convert("RGB")


def test_gray_levels_pick_one_bit() -> None:
    settings = PrepareSettings(gray_levels=2, dithering=DitherAlgorithm.NONE)
    result = ImagePipeline(settings).process(_split_image())
    assert result.content_type == "image/bmp"
    assert result.bits_per_pixel == 1
    assert result.palette_size == 2
    assert (result.width, result.height) == (10, 4)

    offset, width, height, bpp = _bmp_header(result.data)
    assert (offset, width, height, bpp) == (62, 10, 4, 1)
    img = _decode(result.data)
    assert img.getpixel((0, 0)) == (0, 0, 0)
    assert img.getpixel((9, 3)) == (255, 255, 255)


def test_display_palette_writes_device_colors() -> None:
    img = Image.new("RGB", (4, 2), (200, 200, 0))
    settings = PrepareSettings(display="acep", dithering=DitherAlgorithm.NONE)
    result = ImagePipeline(settings).process(img)
    assert result.bits_per_pixel == 4
    assert result.palette_size == 7

    data = result.data
    # entry 5 is dithered as #c8c800 and written as #ffff00
    assert data[54 + 5 * 4 : 54 + 6 * 4] == bytes([0, 255, 255, 0])
    assert _decode(data).getpixel((0, 0)) == (255, 255, 0)


def test_smallest_depth_follows_encoder_config() -> None:
    settings = PrepareSettings(gray_levels=16, dithering=DitherAlgorithm.NONE)
    result = ImagePipeline(settings, config=GRAYSCALE_CONFIG).process(_split_image())
    assert result.bits_per_pixel == 8

    result = ImagePipeline(settings, config=SCREENSHOT_CONFIG).process(_split_image())
    assert result.bits_per_pixel == 4


def test_palette_too_large_for_depth() -> None:
    settings = PrepareSettings(
        bits_per_pixel=2,
        colors=["#000000", "#ffffff", "#ff0000", "#00ff00", "#0000ff"],
    )
    with pytest.raises(PaletteSizeMismatch):
        ImagePipeline(settings).process(_split_image())


def test_depth_outside_encoder_config() -> None:
    settings = PrepareSettings(bits_per_pixel=8)
    with pytest.raises(UnsupportedBitDepth):
        ImagePipeline(settings, config=SCREENSHOT_CONFIG).process(_split_image())


def test_bits_alone_build_a_gray_ramp() -> None:
    pipeline = ImagePipeline(PrepareSettings(bits_per_pixel=2))
    choice = pipeline.resolve_palette()
    assert [color[0] for color in choice.output] == [0, 85, 170, 255]

    pipeline = ImagePipeline(PrepareSettings(bits_per_pixel=8))
    assert len(pipeline.resolve_palette().output) == 256


def test_no_palette_passes_colors_through() -> None:
    img = Image.new("RGB", (3, 2))
    img.putdata([(1, 2, 3), (40, 50, 60), (255, 0, 128), (9, 9, 9), (0, 0, 0), (200, 100, 50)])
    result = ImagePipeline(PrepareSettings()).process(img)
    assert result.bits_per_pixel == 24
    assert result.palette_size == 0
    decoded = _decode(result.data)
    assert list(decoded.getdata()) == list(img.getdata())


def test_rotation_and_fit() -> None:
    settings = PrepareSettings(rotate=90, gray_levels=2, dithering=DitherAlgorithm.ATKINSON)
    result = ImagePipeline(settings).process(_split_image(10, 4))
    assert (result.width, result.height) == (4, 10)
    # clockwise: the black left half ends up on top
    decoded = _decode(result.data)
    assert decoded.getpixel((0, 0)) == (0, 0, 0)
    assert decoded.getpixel((3, 9)) == (255, 255, 255)

    settings = PrepareSettings(width=16, height=12, gray_levels=2)
    result = ImagePipeline(settings).process(_split_image(10, 4))
    assert (result.width, result.height) == (16, 12)
    assert _bmp_header(result.data)[1:3] == (16, 12)


def test_threshold_and_invert_apply_to_the_result() -> None:
    img = Image.new("L", (2, 1))
    img.putdata([230, 100])
    settings = PrepareSettings(threshold=220)
    decoded = _decode(ImagePipeline(settings).process(img).data)
    assert list(decoded.getdata()) == [(255, 255, 255), (0, 0, 0)]

    settings = PrepareSettings(threshold=220, invert=True, gray_levels=2)
    decoded = _decode(ImagePipeline(settings).process(img).data)
    assert list(decoded.getdata()) == [(0, 0, 0), (255, 255, 255)]


def test_threshold_keeps_the_dither_pattern() -> None:
    img = Image.new("RGB", (16, 16), (128, 128, 128))
    settings = PrepareSettings(gray_levels=2, threshold=220, dithering=DitherAlgorithm.FLOYD_STEINBERG)
    plain = _decode(ImagePipeline(settings).process(img).data)
    values = {r for r, g, b in plain.getdata()}
    assert values == {0, 255}

    settings.invert = True
    inverted = _decode(ImagePipeline(settings).process(img).data)
    assert [r for r, _, _ in inverted.getdata()] == [255 - r for r, _, _ in plain.getdata()]


def test_row_order_override() -> None:
    settings = PrepareSettings(gray_levels=2, row_order=RowOrder.TOP_DOWN)
    pipeline = ImagePipeline(settings)
    assert pipeline.encoder_config().row_order is RowOrder.TOP_DOWN
    result = pipeline.process(_split_image())
    assert _bmp_header(result.data)[2] == -4


def test_rgba_input_keeps_working() -> None:
    img = Image.new("RGBA", (4, 4), (255, 255, 255, 0))
    img.paste((0, 0, 0, 255), (0, 0, 2, 4))
    settings = PrepareSettings(gray_levels=2, dithering=DitherAlgorithm.FLOYD_STEINBERG)
    decoded = _decode(ImagePipeline(settings).process(img).data)
    assert decoded.getpixel((0, 0)) == (0, 0, 0)
    assert decoded.getpixel((3, 3)) == (255, 255, 255)


def test_png_output_uses_output_palette() -> None:
    img = Image.new("RGB", (3, 3), (200, 200, 0))
    settings = PrepareSettings(display="acep", dithering=DitherAlgorithm.NONE, format="png")
    result = ImagePipeline(settings).process(img)
    assert result.content_type == "image/png"
    assert result.bits_per_pixel is None
    assert result.data.startswith(b"\x89PNG")
    assert _decode(result.data).getpixel((1, 1)) == (255, 255, 0)


def test_jpg_is_an_alias_for_jpeg() -> None:
    settings = PrepareSettings(gray_levels=2, format="jpg")
    result = ImagePipeline(settings).process(_split_image())
    assert result.content_type == "image/jpeg"
    assert result.data[:2] == b"\xff\xd8"


def test_unknown_output_format() -> None:
    with pytest.raises(ValueError, match="Supported output formats"):
        ImagePipeline(PrepareSettings(format="tiff")).process(_split_image())


def test_process_file(tmp_path) -> None:
    path = tmp_path / "page.png"
    _split_image().save(path)
    result = ImagePipeline(PrepareSettings(gray_levels=2)).process_file(str(path))
    assert result.data[:2] == b"BM"


def test_process_file_rejects_bad_paths(tmp_path) -> None:
    pipeline = ImagePipeline(PrepareSettings())
    with pytest.raises(ValueError, match="Cannot read .page.txt.: expected one of"):
        pipeline.process_file(str(tmp_path / "page.txt"))
    with pytest.raises(FileNotFoundError):
        pipeline.process_file(str(tmp_path / "missing.png"))

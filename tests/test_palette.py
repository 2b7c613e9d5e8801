import pytest

from inkbmp.errors import InvalidPalette, InvalidPaletteSize
from inkbmp.palette import DisplayPaletteRegistry, Palette, build_grayscale_palette, parse_hex_color


def test_two_stop_ramp_is_black_and_white() -> None:
    assert build_grayscale_palette(2).colors == ((0, 0, 0), (255, 255, 255))


def test_four_stop_ramp_values() -> None:
    values = [color[0] for color in build_grayscale_palette(4)]
    assert values == [0, 85, 170, 255]


def test_ramp_is_gray_and_monotonic() -> None:
    palette = build_grayscale_palette(16)
    assert len(palette) == 16
    assert all(r == g == b for r, g, b in palette)
    values = [color[0] for color in palette]
    assert values == sorted(values)
    assert values[0] == 0 and values[-1] == 255


def test_ramp_rounds_halves_up() -> None:
    # 1/2 * 255 = 127.5 and 3/10 * 255 = 76.5
    assert build_grayscale_palette(3)[1] == (128, 128, 128)
    assert build_grayscale_palette(11)[3] == (77, 77, 77)


def test_full_ramp_matches_index() -> None:
    palette = build_grayscale_palette(256)
    assert [color[0] for color in palette] == list(range(256))


def test_single_stop_is_black() -> None:
    assert build_grayscale_palette(1).colors == ((0, 0, 0),)


@pytest.mark.parametrize("n", [0, -3])
def test_ramp_rejects_non_positive_sizes(n: int) -> None:
    with pytest.raises(InvalidPaletteSize):
        build_grayscale_palette(n)


def test_external_palette_keeps_order_and_duplicates() -> None:
    palette = Palette.of([(255, 255, 255), (0, 0, 0), (255, 255, 255)])
    assert palette.colors == ((255, 255, 255), (0, 0, 0), (255, 255, 255))
    assert len(palette) == 3
    assert palette[1] == (0, 0, 0)


def test_palette_from_hex() -> None:
    palette = Palette.from_hex(["#000000", "FF8000", " #1a2B3c "])
    assert palette.colors == ((0, 0, 0), (255, 128, 0), (0x1A, 0x2B, 0x3C))
    assert palette.to_hex() == ["#000000", "#ff8000", "#1a2b3c"]


@pytest.mark.parametrize("text", ["", "#fff", "#12345g", "not a color", "#0000000"])
def test_parse_hex_color_rejects_malformed_input(text: str) -> None:
    with pytest.raises(InvalidPalette):
        parse_hex_color(text)


def test_palette_of_rejects_out_of_range_components() -> None:
    with pytest.raises(InvalidPalette):
        Palette.of([(0, 0, 256)])
    with pytest.raises(InvalidPalette):
        Palette.of([(0, 0)])


def test_empty_palette_fails_validation() -> None:
    with pytest.raises(InvalidPalette):
        Palette(()).validate()


def test_display_registry_loads_bundled_palettes() -> None:
    registry = DisplayPaletteRegistry.load()
    assert {"bw", "acep", "spectra6"} <= set(registry.names)

    spectra = registry.require("Spectra6")
    assert len(spectra.dither_palette) == 6
    assert len(spectra.output_palette) == 6
    assert spectra.output_palette[0] == (0, 0, 0)
    assert spectra.dither_palette != spectra.output_palette


def test_display_without_device_colors_writes_dither_colors() -> None:
    bw = DisplayPaletteRegistry.load().require("bw")
    assert bw.output_palette == bw.dither_palette == Palette.of([(0, 0, 0), (255, 255, 255)])


def test_unknown_display_palette() -> None:
    registry = DisplayPaletteRegistry.load()
    assert registry.get("nope") is None
    with pytest.raises(RuntimeError, match="Unknown display palette"):
        registry.require("nope")

import pytest
from PIL import Image

from inkbmp.rendering import apply_threshold, image_to_raster, invert_image, load_image, rotate_image

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def _red_blue() -> Image.Image:
    img = Image.new("RGB", (2, 1))
    img.putdata([RED, BLUE])
    return img


def test_rotate_90_turns_clockwise() -> None:
    rotated = rotate_image(_red_blue(), 90)
    assert rotated.size == (1, 2)
    assert list(rotated.getdata()) == [RED, BLUE]


def test_rotate_270_turns_counter_clockwise() -> None:
    rotated = rotate_image(_red_blue(), 270)
    assert list(rotated.getdata()) == [BLUE, RED]


def test_rotate_180_and_full_turns() -> None:
    assert list(rotate_image(_red_blue(), 180).getdata()) == [BLUE, RED]
    img = _red_blue()
    assert rotate_image(img, 360) is img


def test_rotate_rejects_other_angles() -> None:
    with pytest.raises(ValueError, match="multiple of 90"):
        rotate_image(_red_blue(), 45)


def test_threshold_is_inclusive() -> None:
    img = Image.new("L", (3, 1))
    img.putdata([219, 220, 221])
    assert list(apply_threshold(img, 220).getdata()) == [0, 255, 255]
    with pytest.raises(ValueError):
        apply_threshold(img, 300)


def test_invert_keeps_alpha() -> None:
    img = Image.new("RGBA", (1, 1), (10, 20, 30, 77))
    assert invert_image(img).getpixel((0, 0)) == (245, 235, 225, 77)


def test_load_image_is_detached_from_the_file(tmp_path) -> None:
    path = tmp_path / "tiny.png"
    _red_blue().save(path)
    img = load_image(str(path))
    path.unlink()
    raster = image_to_raster(img)
    assert raster.pixel(0, 0) == RED
    assert raster.pixel(1, 0) == BLUE

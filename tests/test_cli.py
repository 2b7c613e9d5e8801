import struct

from PIL import Image

from inkbmp.cli import main


def _write_input(tmp_path):
    path = tmp_path / "page.png"
    img = Image.new("RGB", (12, 6), (255, 255, 255))
    img.paste((90, 90, 90), (0, 0, 6, 6))
    img.save(path)
    return path


def test_convert_with_gray_levels(tmp_path) -> None:
    src = _write_input(tmp_path)
    out = tmp_path / "page.bmp"
    code = main([str(src), "-o", str(out), "--gray-levels", "4", "--dither", "floydSteinberg"])
    assert code == 0
    data = out.read_bytes()
    assert data[:2] == b"BM"
    assert struct.unpack_from("<H", data, 28)[0] == 2


def test_convert_with_display_and_row_order(tmp_path) -> None:
    src = _write_input(tmp_path)
    out = tmp_path / "page.bmp"
    code = main([str(src), "-o", str(out), "--display", "bwr", "--row-order", "top-down"])
    assert code == 0
    data = out.read_bytes()
    assert struct.unpack_from("<i", data, 22)[0] == -6
    assert struct.unpack_from("<H", data, 28)[0] == 2


def test_convert_to_png(tmp_path) -> None:
    src = _write_input(tmp_path)
    out = tmp_path / "page.png.out"
    assert main([str(src), "-o", str(out), "--colors", "#000000,#ffffff", "--format", "png"]) == 0
    assert out.read_bytes().startswith(b"\x89PNG")


def test_verbose_reports_on_stderr(tmp_path, capsys) -> None:
    src = _write_input(tmp_path)
    out = tmp_path / "page.bmp"
    assert main([str(src), "-o", str(out), "--bpp", "1", "-v"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "12x6" in captured.err
    assert "1 bpp" in captured.err


def test_missing_arguments(tmp_path, capsys) -> None:
    assert main([]) == 2
    assert "Missing input path" in capsys.readouterr().err

    src = _write_input(tmp_path)
    assert main([str(src)]) == 2
    assert "Missing output path" in capsys.readouterr().err


def test_errors_exit_with_two(tmp_path, capsys) -> None:
    src = _write_input(tmp_path)
    out = tmp_path / "page.bmp"
    assert main([str(src), "-o", str(out), "--dither", "bayer"]) == 2
    assert "Unknown dithering algorithm" in capsys.readouterr().err

    assert main([str(src), "-o", str(out), "--device", "nope"]) == 2
    assert "Unknown device" in capsys.readouterr().err

    assert main([str(src), "-o", str(out), "--bpp", "8", "--encoder", "screenshot"]) == 2
    assert "Unsupported bits per pixel" in capsys.readouterr().err
    assert not out.exists()


def test_listings(capsys) -> None:
    assert main(["--list-devices"]) == 0
    out = capsys.readouterr().out
    assert "trmnl: 800x480, 1 bpp" in out
    assert "aliases: 7in5" in out

    assert main(["--list-displays"]) == 0
    assert "acep: 7 colors" in capsys.readouterr().out

    assert main(["--list-algorithms"]) == 0
    out = capsys.readouterr().out
    assert "atkinson (6 taps, 0.5625 of the error)" in out
    assert "none (0 taps, 0 of the error)" in out

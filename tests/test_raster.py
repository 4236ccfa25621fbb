from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from alchemy_engine.raster import RawImage, fit_within, load_raw_image, raw_to_image, save_raw_image


def test_fit_within() -> None:
    assert fit_within(4000, 2000, 1280) == (1280, 640)
    assert fit_within(100, 50, 1280) == (100, 50)
    assert fit_within(1, 5000, 10) == (1, 10)


def test_load_raw_image(tmp_path: Path) -> None:
    path = tmp_path / "in.png"
    Image.new("RGB", (4, 2), (255, 0, 0)).save(path)
    raw = load_raw_image(path)
    assert (raw.width, raw.height) == (4, 2)
    assert len(raw.data) == 32
    assert raw.data[:4] == bytes([255, 0, 0, 255])


def test_load_raw_image_caps_dimension(tmp_path: Path) -> None:
    path = tmp_path / "in.png"
    Image.new("RGBA", (40, 20), (0, 0, 255, 255)).save(path)
    raw = load_raw_image(path, max_dimension=10, retro=True)
    assert (raw.width, raw.height) == (10, 5)
    smooth = load_raw_image(path, max_dimension=10, retro=False)
    assert (smooth.width, smooth.height) == (10, 5)


def test_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ValueError):
        load_raw_image(path)


def test_buffer_size_is_checked() -> None:
    with pytest.raises(ValueError):
        RawImage(2, 2, b"\x00" * 15)


def test_save_raw_image(tmp_path: Path) -> None:
    raw = RawImage(2, 1, bytes([1, 2, 3, 255, 4, 5, 6, 255]))
    assert raw_to_image(raw).getpixel((1, 0)) == (4, 5, 6, 255)
    png = save_raw_image(raw, tmp_path / "out" / "result.png")
    jpg = save_raw_image(raw, tmp_path / "result.jpg")
    with Image.open(png) as image:
        assert image.size == (2, 1)
    with Image.open(jpg) as image:
        assert image.mode == "RGB"

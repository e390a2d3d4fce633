"""Tests for the Pillow decode/encode adapters."""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from glitchart.buffer import PixelBuffer
from glitchart.imageio import (
    MAX_DIMENSION,
    ImageDecodeError,
    encode_png,
    fit_within,
    from_data_url,
    from_image,
    load_image,
    save_image,
    to_data_url,
)


def _png_bytes(w=8, h=6, mode="RGB", color=(10, 200, 30)):
    img = Image.new(mode, (w, h), color)
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


@pytest.mark.parametrize(
    "size,expected",
    [
        ((800, 600), (800, 600)),
        ((1200, 1200), (1200, 1200)),
        ((2400, 1200), (1200, 600)),
        ((1000, 3000), (400, 1200)),
        ((1201, 10), (1200, 9)),
    ],
)
def test_fit_within(size, expected):
    assert fit_within(*size) == expected


def test_fit_within_never_collapses_to_zero():
    assert fit_within(10_000, 1, 100, 100) == (100, 1)


def test_load_image_converts_to_rgba():
    buf = load_image(_png_bytes())
    assert (buf.width, buf.height) == (8, 6)
    assert buf.get_pixel(3, 2) == (10, 200, 30, 255)


def test_load_image_from_path(tmp_path):
    path = tmp_path / "in.png"
    path.write_bytes(_png_bytes(4, 4))
    assert load_image(str(path)).shape == (4, 4, 4)
    assert load_image(path).shape == (4, 4, 4)


def test_load_image_downscales_large_input():
    buf = load_image(_png_bytes(2400, 300))
    assert (buf.width, buf.height) == (MAX_DIMENSION, 150)


def test_load_image_max_size_none_keeps_size():
    assert load_image(_png_bytes(1300, 2), max_size=None).width == 1300


def test_load_image_rejects_garbage(tmp_path):
    with pytest.raises(ImageDecodeError):
        load_image(b"definitely not an image")
    with pytest.raises(ImageDecodeError):
        load_image(str(tmp_path / "missing.png"))


def test_load_image_wraps_decompression_bomb(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageDecodeError) as excinfo:
        load_image(_png_bytes(8, 6))
    assert isinstance(excinfo.value.__cause__, Image.DecompressionBombError)


def test_from_image_keeps_alpha():
    img = Image.new("RGBA", (3, 3), (1, 2, 3, 40))
    assert from_image(img).get_pixel(1, 1) == (1, 2, 3, 40)


def test_encode_png_round_trip():
    frame = np.random.default_rng(1).integers(0, 256, (5, 7, 4), dtype=np.uint8)
    buf = PixelBuffer.from_array(frame)
    assert load_image(encode_png(buf)) == buf


def test_data_url_round_trip():
    buf = PixelBuffer.solid(3, 2, (255, 0, 128, 255))
    url = to_data_url(buf)
    assert url.startswith("data:image/png;base64,")
    assert from_data_url(url) == buf


@pytest.mark.parametrize(
    "text",
    [
        "http://example.com/a.png",
        "data:image/gif;base64,R0lGOD",
        "data:image/png;base64,",
        "data:image/png;base64,!!!notbase64!!!",
    ],
)
def test_from_data_url_rejects_bad_input(text):
    with pytest.raises(ImageDecodeError):
        from_data_url(text)


def test_from_data_url_accepts_jpeg():
    img = Image.new("RGB", (4, 4), (0, 0, 0))
    out = io.BytesIO()
    img.save(out, format="JPEG")
    url = "data:image/jpeg;base64," + base64.b64encode(out.getvalue()).decode()
    assert from_data_url(url).shape == (4, 4, 4)


def test_save_image_png_and_jpeg(tmp_path):
    buf = PixelBuffer.solid(4, 4, (200, 100, 50, 255))
    png = tmp_path / "out.png"
    jpg = tmp_path / "out.jpg"
    save_image(buf, png)
    save_image(buf, jpg)
    assert load_image(png) == buf
    with Image.open(jpg) as img:
        assert img.mode == "RGB"

import io

import pytest
from PIL import Image, UnidentifiedImageError

from conftest import png_bytes

from core.postprocess import encode_webp, optimize_image, resize_to_max_width


def test_resize_keeps_aspect_ratio():
    resized = resize_to_max_width(Image.new("RGB", (2160, 3840)), 1080)
    assert resized.size == (1080, 1920)


def test_resize_never_upscales():
    image = Image.new("RGB", (640, 480))
    assert resize_to_max_width(image, 1080) is image


def test_encode_webp_handles_palette_images():
    image = Image.new("P", (10, 10))
    data = encode_webp(image)
    assert Image.open(io.BytesIO(data)).format == "WEBP"


def test_optimize_image_outputs_webp():
    data = optimize_image(png_bytes(2000, 1000), max_width=500)
    with Image.open(io.BytesIO(data)) as out:
        assert out.format == "WEBP"
        assert out.size == (500, 250)


def test_optimize_image_rejects_non_images():
    with pytest.raises(UnidentifiedImageError):
        optimize_image(b"definitely not an image")

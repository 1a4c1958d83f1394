"""
Unit tests for raster decoding and dimension calculation
"""

import io

import numpy as np
import pytest
from PIL import Image

from sizefit.core.exceptions import DecodeError
from sizefit.core.raster import RasterImage, calculate_dimensions, decode_image
from sizefit.models.processing import ImageFormat


def encode_pil(image: Image.Image, fmt: str) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


class TestCalculateDimensions:
    """Test bounded resizing"""

    def test_both_bounds_landscape(self):
        assert calculate_dimensions(4000, 2000, 1000, 1000, True) == (1000, 500)

    def test_both_bounds_portrait(self):
        assert calculate_dimensions(2000, 4000, 1000, 1000, True) == (500, 1000)

    def test_wide_box_binds_height(self):
        assert calculate_dimensions(1000, 1000, 800, 400, True) == (400, 400)

    def test_width_only(self):
        assert calculate_dimensions(3000, 1000, 1000, None, True) == (1000, 333)

    def test_height_only(self):
        assert calculate_dimensions(3000, 1000, None, 500, True) == (1500, 500)

    def test_no_upscale(self):
        assert calculate_dimensions(500, 300, 1000, 1000, True) == (500, 300)

    def test_independent_clamp(self):
        assert calculate_dimensions(4000, 2000, 1000, 1000, False) == (1000, 1000)
        assert calculate_dimensions(4000, 200, 1000, 1000, False) == (1000, 200)

    def test_never_below_one(self):
        assert calculate_dimensions(10000, 1, 100, None, True) == (100, 1)

    def test_rounds_half_up(self):
        # width 2.5 rounds up, not to even
        assert calculate_dimensions(5, 2, None, 1, True) == (3, 1)

    def test_no_bounds(self):
        assert calculate_dimensions(640, 480) == (640, 480)


class TestRasterImage:
    """Test the raster value type"""

    def test_rejects_mismatched_shape(self):
        with pytest.raises(ValueError):
            RasterImage(width=2, height=2, pixels=np.zeros((2, 3, 4), dtype=np.uint8))

    def test_rejects_wrong_dtype(self):
        with pytest.raises(ValueError):
            RasterImage(width=1, height=1, pixels=np.zeros((1, 1, 4), dtype=np.float32))

    def test_pixels_read_only(self, solid_raster):
        with pytest.raises(ValueError):
            solid_raster.pixels[0, 0, 0] = 1

    def test_caller_array_untouched(self):
        pixels = np.zeros((2, 2, 4), dtype=np.uint8)
        raster = RasterImage(width=2, height=2, pixels=pixels)

        pixels[0, 0, 0] = 9

        assert pixels.flags.writeable
        assert raster.pixels[0, 0, 0] == 0

    def test_resize_same_size_returns_self(self, solid_raster):
        assert solid_raster.resize(64, 64) is solid_raster

    def test_resize(self, solid_raster):
        resized = solid_raster.resize(16, 8)
        assert resized.size == (16, 8)
        assert resized.pixels.shape == (8, 16, 4)

    def test_to_pil_is_independent(self, solid_raster):
        image = solid_raster.to_pil()
        image.putpixel((0, 0), (0, 0, 0, 0))
        assert solid_raster.pixels[0, 0, 3] == 255


class TestDecodeImage:
    """Test decoding"""

    def test_decode_png_with_alpha(self):
        image = Image.new("RGBA", (8, 4), (255, 0, 0, 100))
        raster, detected = decode_image(encode_pil(image, "PNG"))

        assert detected is ImageFormat.PNG
        assert raster.size == (8, 4)
        assert raster.pixels[0, 0].tolist() == [255, 0, 0, 100]

    def test_decode_jpeg_is_opaque_rgba(self):
        image = Image.new("RGB", (8, 8), (0, 128, 0))
        raster, detected = decode_image(encode_pil(image, "JPEG"))

        assert detected is ImageFormat.JPEG
        assert raster.pixels.shape == (8, 8, 4)
        assert (raster.pixels[..., 3] == 255).all()

    def test_unknown_family_falls_back_to_declared_type(self):
        image = Image.new("RGB", (4, 4))
        _, detected = decode_image(encode_pil(image, "BMP"), "image/webp")
        assert detected is ImageFormat.WEBP

    def test_unknown_family(self):
        image = Image.new("RGB", (4, 4))
        _, detected = decode_image(encode_pil(image, "BMP"))
        assert detected is None

    def test_empty_data(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_image(b"")
        assert exc_info.value.error_code == "SF101"

    def test_corrupt_data(self):
        with pytest.raises(DecodeError):
            decode_image(b"definitely not an image")

    def test_pixel_limit(self, monkeypatch):
        from sizefit.config import settings

        monkeypatch.setattr(settings, "max_image_pixels", 10)
        with pytest.raises(DecodeError, match="maximum pixel count"):
            decode_image(encode_pil(Image.new("RGB", (4, 4)), "PNG"))

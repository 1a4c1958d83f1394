"""
Shared fixtures for sizefit tests
"""

import io
import threading
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import pytest
from PIL import Image

from sizefit.core.exceptions import EncodeError
from sizefit.core.raster import RasterImage
from sizefit.models.processing import ImageFormat


def make_raster(pixels: np.ndarray) -> RasterImage:
    """Wrap an (h, w, 4) uint8 array as a raster."""
    height, width = pixels.shape[:2]
    return RasterImage(width=width, height=height, pixels=pixels.astype(np.uint8))


@pytest.fixture
def solid_raster() -> RasterImage:
    """Opaque single-color 64x64 raster (graphic)"""
    pixels = np.zeros((64, 64, 4), dtype=np.uint8)
    pixels[..., :3] = (200, 40, 40)
    pixels[..., 3] = 255
    return make_raster(pixels)


@pytest.fixture
def transparent_raster() -> RasterImage:
    """Half-transparent single-color 100x100 raster"""
    pixels = np.zeros((100, 100, 4), dtype=np.uint8)
    pixels[..., :3] = (10, 120, 250)
    pixels[..., 3] = 128
    return make_raster(pixels)


@pytest.fixture
def photo_raster() -> RasterImage:
    """Opaque 200x50 raster of smooth, all-distinct colors (photo-like)"""
    x = np.arange(200)
    y = np.arange(50)[:, None]
    pixels = np.zeros((50, 200, 4), dtype=np.uint8)
    pixels[..., 0] = (x * 11) % 256
    pixels[..., 1] = y * 5
    pixels[..., 2] = (x * 7) % 256
    pixels[..., 3] = 255
    return make_raster(pixels)


@pytest.fixture
def noise_raster() -> RasterImage:
    """Opaque 128x128 random noise, hard to compress"""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(128, 128, 4), dtype=np.uint8)
    pixels[..., 3] = 255
    return make_raster(pixels)


@pytest.fixture
def noise_png_bytes(noise_raster) -> bytes:
    """Noise raster saved as PNG"""
    buffer = io.BytesIO()
    noise_raster.to_pil().convert("RGB").save(buffer, format="PNG")
    return buffer.getvalue()


SizeFunction = Callable[[int], int]


class SyntheticEncoder:
    """Encoder double whose output size is a function of quality.

    ``sizes`` maps each format to a size function; formats without an
    entry (or listed in ``failing``) raise EncodeError.
    """

    def __init__(
        self,
        sizes: Dict[ImageFormat, SizeFunction],
        failing: Tuple[ImageFormat, ...] = (),
    ):
        self.sizes = sizes
        self.failing = failing
        self.calls: List[Tuple[ImageFormat, int, int]] = []
        self.rasters: List[RasterImage] = []
        self._lock = threading.Lock()

    def encode(
        self, raster: RasterImage, fmt: ImageFormat, quality: int, effort: int
    ) -> bytes:
        with self._lock:
            self.calls.append((fmt, quality, effort))
            self.rasters.append(raster)
        size_of: Optional[SizeFunction] = self.sizes.get(fmt)
        if size_of is None or fmt in self.failing:
            raise EncodeError(f"synthetic failure for {fmt.value}", details={"format": fmt.value})
        return b"\0" * size_of(quality)

    def qualities(self, fmt: ImageFormat) -> List[int]:
        return [quality for called, quality, _ in self.calls if called is fmt]


def linear(per_quality: int = 1000) -> SizeFunction:
    """Size grows linearly with quality."""
    return lambda quality: per_quality * quality


def constant(size: int) -> SizeFunction:
    """Size ignores quality, like lossless PNG."""
    return lambda quality: size


@pytest.fixture
def encoder_factory():
    """Build SyntheticEncoder instances"""
    return SyntheticEncoder

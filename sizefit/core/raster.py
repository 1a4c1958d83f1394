"""Raster buffers, decoding and resizing."""

import io
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from sizefit.config import settings
from sizefit.core.exceptions import DecodeError
from sizefit.models.processing import ImageFormat
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RasterImage:
    """Decoded RGBA pixels, row-major, 8 bits per channel, straight alpha."""

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Raster dimensions must be at least 1x1")
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Pixel buffer shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height}x4"
            )
        if self.pixels.dtype != np.uint8:
            raise ValueError("Pixel buffer must be uint8")
        # Own a read-only copy shared by the analyzer and every encode attempt
        pixels = self.pixels.copy()
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_pil(cls, image: Image.Image) -> "RasterImage":
        """Copy a Pillow image into an RGBA raster."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        pixels = np.array(rgba, dtype=np.uint8)
        return cls(width=rgba.width, height=rgba.height, pixels=pixels)

    def to_pil(self) -> Image.Image:
        """Fresh Pillow image; encoders may mutate it freely."""
        return Image.fromarray(self.pixels.copy())

    def resize(self, width: int, height: int) -> "RasterImage":
        """Return a resampled copy, or self when the size is unchanged."""
        if (width, height) == self.size:
            return self
        resized = self.to_pil().resize((width, height), Image.Resampling.LANCZOS)
        return RasterImage.from_pil(resized)


def decode_image(
    data: bytes, mime_type: Optional[str] = None
) -> Tuple[RasterImage, Optional[ImageFormat]]:
    """Decode image bytes into a raster.

    Args:
        data: Encoded image bytes
        mime_type: Declared type, used when Pillow cannot name the format

    Returns:
        Tuple of (raster, detected format family or None)

    Raises:
        DecodeError: If the data is empty, corrupt or too large
    """
    if not data:
        raise DecodeError("Empty image data", details={"data_size": 0})

    try:
        with io.BytesIO(data) as buffer:
            with Image.open(buffer) as img:
                if img.width * img.height > settings.max_image_pixels:
                    raise DecodeError(
                        "Image exceeds the maximum pixel count",
                        details={
                            "data_size": len(data),
                            "reason": f"{img.width}x{img.height}",
                        },
                    )
                img.load()
                detected = ImageFormat.from_declared_type(img.format) or (
                    ImageFormat.from_declared_type(mime_type)
                )
                raster = RasterImage.from_pil(img)
    except DecodeError:
        raise
    except (
        UnidentifiedImageError,
        OSError,
        ValueError,
        Image.DecompressionBombError,
    ) as e:
        raise DecodeError(
            f"Failed to decode image: {str(e)}",
            details={
                "mime_type": mime_type or "",
                "data_size": len(data),
                "reason": str(e),
            },
        ) from e

    logger.debug(
        "Decoded image",
        width=raster.width,
        height=raster.height,
        format=detected.value if detected else None,
    )
    return raster, detected


def calculate_dimensions(
    original_width: int,
    original_height: int,
    max_width: Optional[int] = None,
    max_height: Optional[int] = None,
    maintain_aspect_ratio: bool = True,
) -> Tuple[int, int]:
    """Fit an image into optional width/height bounds.

    With both bounds and aspect preservation, the box is compared with the
    image aspect ratio: a box wider than the image binds on height, otherwise
    on width. Without aspect preservation each axis is clamped on its own.
    Results are rounded and never below 1.
    """
    new_width: float = original_width
    new_height: float = original_height

    if maintain_aspect_ratio:
        aspect_ratio = original_width / original_height

        if max_width and max_height:
            if original_width > max_width or original_height > max_height:
                if max_width / max_height > aspect_ratio:
                    new_height = max_height
                    new_width = new_height * aspect_ratio
                else:
                    new_width = max_width
                    new_height = new_width / aspect_ratio
        elif max_width and original_width > max_width:
            new_width = max_width
            new_height = new_width / aspect_ratio
        elif max_height and original_height > max_height:
            new_height = max_height
            new_width = new_height * aspect_ratio
    else:
        if max_width and original_width > max_width:
            new_width = max_width
        if max_height and original_height > max_height:
            new_height = max_height

    return max(1, _round_half_up(new_width)), max(1, _round_half_up(new_height))


def _round_half_up(value: float) -> int:
    # Half-up, not round-half-even
    return math.floor(value + 0.5)

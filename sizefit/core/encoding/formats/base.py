"""Base format handler interface."""

from abc import ABC, abstractmethod
from io import BytesIO
from typing import Any, BinaryIO, Dict

from PIL import Image

from sizefit.core.exceptions import EncodeError


class BaseFormatHandler(ABC):
    """Abstract base class for format encoders."""

    format_name: str = ""
    supported_formats: tuple[str, ...] = ()

    def can_handle(self, format_name: str) -> bool:
        """Check if this handler can encode the given format."""
        return format_name.lower() in self.supported_formats

    def is_available(self) -> bool:
        """Whether the codec is usable on this host."""
        return True

    def encode(self, image: Image.Image, quality: int, effort: int) -> bytes:
        """Encode an RGBA image at the given quality and effort.

        Raises:
            EncodeError: If the codec rejects the image or settings
        """
        prepared = self.prepare_image(image)
        buffer = BytesIO()
        try:
            self.save_image(prepared, buffer, quality, effort)
        except EncodeError:
            raise
        except Exception as e:
            raise EncodeError(
                f"Failed to save image as {self.format_name}: {str(e)}",
                details={
                    "format": self.format_name,
                    "quality": quality,
                    "effort": effort,
                    "error": str(e),
                },
            ) from e
        return buffer.getvalue()

    @abstractmethod
    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: int, effort: int
    ) -> None:
        """Save image to buffer with given settings."""

    def get_quality_param(self, quality: int, effort: int) -> Dict[str, Any]:
        """Get format-specific save parameters."""
        return {"quality": quality}

    def prepare_image(self, image: Image.Image) -> Image.Image:
        """Prepare image for encoding (e.g., drop alpha if unsupported)."""
        if image.mode == "RGBA" and not self._supports_transparency():
            # Composite onto white
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            return background

        if image.mode not in ("RGB", "RGBA"):
            return image.convert("RGBA" if self._supports_transparency() else "RGB")

        return image

    def _supports_transparency(self) -> bool:
        """Check if format supports transparency."""
        return False

"""AVIF format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from sizefit.core.encoding.formats.base import BaseFormatHandler
from sizefit.core.exceptions import UnsupportedFormatError
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)

try:
    import pillow_avif  # noqa: F401
except ImportError:
    pass

# Pillow >= 11.3 ships an AVIF encoder; older releases need pillow-avif-plugin
Image.init()
AVIF_AVAILABLE = "AVIF" in Image.SAVE

if not AVIF_AVAILABLE:
    logger.warning("AVIF encoder not available, AVIF output disabled")


class AVIFHandler(BaseFormatHandler):
    """Handler for AVIF format."""

    format_name = "AVIF"
    supported_formats = ("avif",)

    def is_available(self) -> bool:
        return AVIF_AVAILABLE

    def can_handle(self, format_name: str) -> bool:
        """Check if this handler can process the given format."""
        return format_name.lower() in self.supported_formats and AVIF_AVAILABLE

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: int, effort: int
    ) -> None:
        """Save image as AVIF."""
        if not AVIF_AVAILABLE:
            raise UnsupportedFormatError(
                "AVIF support not available. Install Pillow>=11.3 or pillow-avif-plugin.",
                details={"format": "AVIF"},
            )

        image.save(output_buffer, format="AVIF", **self.get_quality_param(quality, effort))

    def get_quality_param(self, quality: int, effort: int) -> Dict[str, Any]:
        """Get AVIF-specific quality parameters."""
        # speed 0 (slowest) - 10 (fastest), inverse of effort
        speed = max(0, min(10, 10 - effort))
        return {
            "quality": quality,
            "speed": speed,
            "subsampling": "4:2:0" if quality < 90 else "4:4:4",
        }

    def _supports_transparency(self) -> bool:
        """AVIF supports transparency."""
        return True

"""WebP format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from sizefit.core.encoding.formats.base import BaseFormatHandler


class WebPHandler(BaseFormatHandler):
    """Handler for WebP format."""

    format_name = "WEBP"
    supported_formats = ("webp",)

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: int, effort: int
    ) -> None:
        """Save image as lossy WebP."""
        save_params = self.get_quality_param(quality, effort)

        if image.mode == "RGBA":
            save_params["exact"] = False  # Allow inexact RGBA->RGBA conversion

        image.save(output_buffer, format="WEBP", **save_params)

    def get_quality_param(self, quality: int, effort: int) -> Dict[str, Any]:
        """Get WebP-specific quality parameters."""
        # method 0-6, scaled from effort 0-9
        method = max(0, min(6, round(effort * 6 / 9)))
        return {"quality": quality, "method": method, "lossless": False}

    def _supports_transparency(self) -> bool:
        """WebP supports transparency."""
        return True

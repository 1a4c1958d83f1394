"""PNG format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from sizefit.core.encoding.formats.base import BaseFormatHandler


class PNGHandler(BaseFormatHandler):
    """Handler for PNG format.

    PNG is lossless: quality has no effect on the output and only the effort
    level (zlib compression level 0-9) changes the size.
    """

    format_name = "PNG"
    supported_formats = ("png",)

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: int, effort: int
    ) -> None:
        """Save image as PNG."""
        image.save(output_buffer, format="PNG", **self.get_quality_param(quality, effort))

    def get_quality_param(self, quality: int, effort: int) -> Dict[str, Any]:
        """Get PNG-specific parameters."""
        compress_level = max(0, min(9, effort))
        params: Dict[str, Any] = {"compress_level": compress_level}
        if compress_level == 9:
            params["optimize"] = True
        return params

    def _supports_transparency(self) -> bool:
        """PNG supports transparency."""
        return True

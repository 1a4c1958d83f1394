"""JPEG format handler."""

from typing import Any, BinaryIO, Dict

from PIL import Image

from sizefit.core.encoding.formats.base import BaseFormatHandler


class JPEGHandler(BaseFormatHandler):
    """Handler for JPEG format."""

    format_name = "JPEG"
    supported_formats = ("jpeg", "jpg")

    def save_image(
        self, image: Image.Image, output_buffer: BinaryIO, quality: int, effort: int
    ) -> None:
        """Save image as JPEG."""
        save_params = self.get_quality_param(quality, effort)

        if effort > 0:
            save_params["optimize"] = True
        if effort >= 6:
            save_params["progressive"] = True

        image.save(output_buffer, format="JPEG", **save_params)

    def get_quality_param(self, quality: int, effort: int) -> Dict[str, Any]:
        """Get JPEG-specific quality parameters."""
        return {
            "quality": quality,
            "subsampling": 0 if quality > 90 else 2,  # 4:4:4 for high quality
        }

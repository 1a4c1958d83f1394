"""Encode capability used by the quality search."""

from typing import Callable, Dict, List, Protocol, Union

from sizefit.core.encoding.formats.avif_handler import AVIFHandler
from sizefit.core.encoding.formats.base import BaseFormatHandler
from sizefit.core.encoding.formats.jpeg_handler import JPEGHandler
from sizefit.core.encoding.formats.png_handler import PNGHandler
from sizefit.core.encoding.formats.webp_handler import WebPHandler
from sizefit.core.exceptions import UnsupportedFormatError
from sizefit.core.raster import RasterImage
from sizefit.models.processing import ImageFormat
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)


class Encoder(Protocol):
    """Raster + format + quality (+ effort) -> encoded bytes, or EncodeError."""

    def encode(
        self, raster: RasterImage, fmt: ImageFormat, quality: int, effort: int
    ) -> bytes:
        ...


class PillowEncoder:
    """Encoder backed by Pillow format handlers."""

    def __init__(self) -> None:
        self.format_handlers: Dict[ImageFormat, BaseFormatHandler] = {}
        self._register_default_handlers()

    def _register_default_handlers(self) -> None:
        self.register_handler(ImageFormat.JPEG, JPEGHandler)
        self.register_handler(ImageFormat.PNG, PNGHandler)
        self.register_handler(ImageFormat.WEBP, WebPHandler)
        self.register_handler(ImageFormat.AVIF, AVIFHandler)

    def register_handler(
        self,
        fmt: Union[ImageFormat, str],
        handler_factory: Callable[[], BaseFormatHandler],
    ) -> None:
        """Register (or replace) the handler for a format."""
        self.format_handlers[ImageFormat(fmt)] = handler_factory()

    def available_formats(self) -> List[ImageFormat]:
        """Formats whose codec is usable on this host."""
        return [
            fmt for fmt, handler in self.format_handlers.items() if handler.is_available()
        ]

    def encode(
        self, raster: RasterImage, fmt: ImageFormat, quality: int, effort: int
    ) -> bytes:
        """Encode a raster.

        Raises:
            UnsupportedFormatError: If no usable handler is registered for the format
            EncodeError: If the handler fails
        """
        fmt = ImageFormat(fmt)
        handler = self.format_handlers.get(fmt)
        if handler is None or not handler.can_handle(fmt.value):
            raise UnsupportedFormatError(
                f"No encoder available for format '{fmt.value}'",
                details={"format": fmt.value},
            )

        data = handler.encode(raster.to_pil(), quality, effort)
        logger.debug(
            "Encoded raster",
            format=handler.format_name,
            quality=quality,
            effort=effort,
            size=len(data),
        )
        return data

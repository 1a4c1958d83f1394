"""Service entry points for encoding image bytes to a target size."""

import asyncio
from typing import Optional

from sizefit.config import settings
from sizefit.core.exceptions import InvalidOptionsError
from sizefit.core.optimization.orchestrator import EncodeResult, SizeConstrainedOptimizer
from sizefit.core.raster import decode_image
from sizefit.models.processing import ProcessingOptions
from sizefit.utils.logging import get_logger
from sizefit.utils.sizes import format_bytes

logger = get_logger(__name__)


def validate_options(options: ProcessingOptions, source_size: int) -> None:
    """Check options against the source before any encoding work.

    Raises:
        InvalidOptionsError: If the target is not below the source size or
            under the minimum target size
    """
    target = options.target_size_bytes

    if target >= source_size:
        raise InvalidOptionsError(
            "Target size must be smaller than original size",
            details={
                "field_name": "target_size_bytes",
                "field_value": target,
                "constraints": f"< {source_size}",
            },
        )

    if target < settings.min_target_size_bytes:
        raise InvalidOptionsError(
            "Target size is too small "
            f"(minimum {format_bytes(settings.min_target_size_bytes)})",
            details={
                "field_name": "target_size_bytes",
                "field_value": target,
                "constraints": f">= {settings.min_target_size_bytes}",
            },
        )


class ResizeService:
    """Decodes, validates and optimizes encoded images."""

    def __init__(self, optimizer: Optional[SizeConstrainedOptimizer] = None):
        self.optimizer = optimizer or SizeConstrainedOptimizer()

    def optimize_bytes(
        self,
        image_data: bytes,
        options: ProcessingOptions,
        mime_type: Optional[str] = None,
    ) -> EncodeResult:
        """Encode image bytes to the target size.

        Args:
            image_data: Encoded source image
            options: Processing options
            mime_type: Declared source type, used when detection fails

        Returns:
            EncodeResult

        Raises:
            DecodeError: If the source cannot be decoded
            InvalidOptionsError: If options do not fit the source
            NoViableEncodingError: If no format reached the target window
        """
        validate_options(options, len(image_data))
        raster, detected = decode_image(image_data, mime_type)

        logger.info(
            "Processing image",
            source_size=len(image_data),
            width=raster.width,
            height=raster.height,
            source_format=detected.value if detected else mime_type,
            target=options.target_size_bytes,
        )
        return self.optimizer.process(raster, options, detected or mime_type)

    async def optimize_bytes_async(
        self,
        image_data: bytes,
        options: ProcessingOptions,
        mime_type: Optional[str] = None,
        parallel: bool = False,
    ) -> EncodeResult:
        """Async variant of ``optimize_bytes``."""
        validate_options(options, len(image_data))
        raster, detected = await asyncio.to_thread(decode_image, image_data, mime_type)
        return await self.optimizer.process_async(
            raster, options, detected or mime_type, parallel=parallel
        )


def optimize_bytes(
    image_data: bytes,
    options: ProcessingOptions,
    mime_type: Optional[str] = None,
) -> EncodeResult:
    """Encode image bytes to the target size with a default service."""
    return ResizeService().optimize_bytes(image_data, options, mime_type)

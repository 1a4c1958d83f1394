"""Ordered candidate formats for automatic format selection."""

from typing import Dict, Optional, Tuple, Union

from sizefit.models.processing import ImageFormat, OutputFormat
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)

JPEG = ImageFormat.JPEG
PNG = ImageFormat.PNG
WEBP = ImageFormat.WEBP
AVIF = ImageFormat.AVIF

CandidateSequence = Tuple[ImageFormat, ...]

# Key: (original family, has_transparency, is_photo); None family means
# unknown/other. Every combination is spelled out so the table can be read
# without the code.
FORMAT_PRIORITY_TABLE: Dict[Tuple[Optional[ImageFormat], bool, bool], CandidateSequence] = {
    # Lossless-capable first when alpha must survive; JPEG dropped
    (PNG, True, True): (PNG, WEBP, AVIF),
    (PNG, True, False): (PNG, WEBP, AVIF),
    (PNG, False, True): (PNG, WEBP, AVIF, JPEG),
    (PNG, False, False): (PNG, WEBP, AVIF, JPEG),
    # Photos stay JPEG first, graphics saved as JPEG try WebP first
    (JPEG, True, True): (JPEG, WEBP, AVIF),
    (JPEG, False, True): (JPEG, WEBP, AVIF),
    (JPEG, True, False): (WEBP, JPEG, AVIF),
    (JPEG, False, False): (WEBP, JPEG, AVIF),
    (WEBP, True, True): (WEBP, AVIF, JPEG, PNG),
    (WEBP, True, False): (WEBP, AVIF, JPEG, PNG),
    (WEBP, False, True): (WEBP, AVIF, JPEG, PNG),
    (WEBP, False, False): (WEBP, AVIF, JPEG, PNG),
    (AVIF, True, True): (AVIF, WEBP, JPEG, PNG),
    (AVIF, True, False): (AVIF, WEBP, JPEG, PNG),
    (AVIF, False, True): (AVIF, WEBP, JPEG, PNG),
    (AVIF, False, False): (AVIF, WEBP, JPEG, PNG),
    (None, True, True): (WEBP, PNG, AVIF, JPEG),
    (None, True, False): (WEBP, PNG, AVIF, JPEG),
    (None, False, True): (WEBP, JPEG, AVIF, PNG),
    (None, False, False): (WEBP, PNG, AVIF, JPEG),
}


class FormatSequencer:
    """Chooses the order in which output formats are attempted."""

    def __init__(
        self,
        table: Optional[Dict[Tuple[Optional[ImageFormat], bool, bool], CandidateSequence]] = None,
    ):
        self.table = table if table is not None else FORMAT_PRIORITY_TABLE

    def sequence(
        self,
        original_format: Union[ImageFormat, str, None],
        requested_format: Union[OutputFormat, str],
        has_transparency: bool,
        is_photo: bool,
    ) -> CandidateSequence:
        """Build the candidate sequence.

        Args:
            original_format: Source format family, MIME type or format name
            requested_format: Caller's requested output format or ``auto``
            has_transparency: Whether the raster has transparent pixels
            is_photo: Whether the raster was classified as a photo

        Returns:
            Non-empty tuple of distinct formats, highest priority first
        """
        requested = OutputFormat(requested_format)
        explicit = requested.to_image_format()
        if explicit is not None:
            return (explicit,)

        if isinstance(original_format, ImageFormat):
            family = original_format
        else:
            family = ImageFormat.from_declared_type(original_format)

        candidates = self.table[(family, bool(has_transparency), bool(is_photo))]

        logger.info(
            "Format sequence selected",
            original=family.value if family else "unknown",
            sequence=[fmt.value for fmt in candidates],
        )
        return candidates

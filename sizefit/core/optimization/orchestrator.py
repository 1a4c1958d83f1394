"""Size-constrained encoding pipeline."""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from sizefit.config import settings
from sizefit.core.analysis.content_analyzer import ContentAnalyzer, ContentCharacteristics
from sizefit.core.encoding.encoder import Encoder, PillowEncoder
from sizefit.core.exceptions import NoViableEncodingError
from sizefit.core.optimization.quality_search import QualitySearchEngine, SearchOutcome
from sizefit.core.raster import RasterImage, calculate_dimensions
from sizefit.core.sequencing.format_sequencer import CandidateSequence, FormatSequencer
from sizefit.models.processing import ImageFormat, ProcessingOptions
from sizefit.utils.logging import LoggingContext, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EncodeResult:
    """Chosen encoding for one processing run."""

    format: ImageFormat
    quality: int
    data: bytes = field(repr=False)
    size: int = 0
    width: int = 0
    height: int = 0
    target_size_bytes: int = 0
    sequence: CandidateSequence = ()
    tolerance_used: Optional[int] = None
    probes: int = 0
    characteristics: Optional[ContentCharacteristics] = None
    processing_time: float = 0.0

    @property
    def percent_of_target(self) -> float:
        if not self.target_size_bytes:
            return 0.0
        return self.size / self.target_size_bytes * 100


@dataclass
class _RunContext:
    raster: RasterImage
    characteristics: ContentCharacteristics
    sequence: CandidateSequence


class SizeConstrainedOptimizer:
    """Resizes, analyzes, picks candidate formats and searches each in order."""

    def __init__(
        self,
        encoder: Optional[Encoder] = None,
        analyzer: Optional[ContentAnalyzer] = None,
        sequencer: Optional[FormatSequencer] = None,
        search_engine: Optional[QualitySearchEngine] = None,
        max_concurrent_formats: Optional[int] = None,
    ):
        self.encoder = encoder or PillowEncoder()
        self.analyzer = analyzer or ContentAnalyzer()
        self.sequencer = sequencer or FormatSequencer()
        self.search_engine = search_engine or QualitySearchEngine(self.encoder)
        self.max_concurrent_formats = (
            max_concurrent_formats or settings.max_concurrent_formats
        )

    def process(
        self,
        source: RasterImage,
        options: ProcessingOptions,
        original_format: Union[ImageFormat, str, None] = None,
    ) -> EncodeResult:
        """Encode a raster to the target size.

        Args:
            source: Decoded source raster (never modified)
            options: Validated processing options
            original_format: Source format family or declared type

        Returns:
            EncodeResult from the first candidate format that succeeded

        Raises:
            NoViableEncodingError: If every candidate format was exhausted
        """
        start_time = time.time()
        with self._logging_context(options):
            run = self._prepare(source, options, original_format)
            outcomes: List[SearchOutcome] = []

            for fmt in run.sequence:
                logger.info("Attempting format", format=fmt.value)
                outcome = self._search(run.raster, fmt, options)
                outcomes.append(outcome)
                if outcome.found:
                    return self._build_result(run, options, outcome, outcomes, start_time)

            raise self._no_viable_encoding(run.sequence, options)

    async def process_async(
        self,
        source: RasterImage,
        options: ProcessingOptions,
        original_format: Union[ImageFormat, str, None] = None,
        parallel: bool = False,
    ) -> EncodeResult:
        """Async variant of ``process``; Pillow work runs in worker threads.

        With ``parallel`` every candidate format is searched at once and the
        winner is still the earliest successful format in sequence order.
        """
        if not parallel:
            return await asyncio.to_thread(self.process, source, options, original_format)

        start_time = time.time()
        with self._logging_context(options):
            run = await asyncio.to_thread(self._prepare, source, options, original_format)
            semaphore = asyncio.Semaphore(self.max_concurrent_formats)

            async def search_format(fmt: ImageFormat) -> SearchOutcome:
                async with semaphore:
                    return await asyncio.to_thread(self._search, run.raster, fmt, options)

            outcomes = await asyncio.gather(*(search_format(fmt) for fmt in run.sequence))

            for outcome in outcomes:
                if outcome.found:
                    return self._build_result(run, options, outcome, list(outcomes), start_time)

            raise self._no_viable_encoding(run.sequence, options)

    @staticmethod
    def _logging_context(options: ProcessingOptions) -> LoggingContext:
        # One correlation id per processing run
        return LoggingContext(
            correlation_id=str(uuid.uuid4()), target=options.target_size_bytes
        )

    def _prepare(
        self,
        source: RasterImage,
        options: ProcessingOptions,
        original_format: Union[ImageFormat, str, None],
    ) -> _RunContext:
        width, height = calculate_dimensions(
            source.width,
            source.height,
            options.max_width,
            options.max_height,
            options.maintain_aspect_ratio,
        )
        raster = source.resize(width, height)
        if raster is not source:
            logger.info(
                "Resized raster",
                original=f"{source.width}x{source.height}",
                resized=f"{width}x{height}",
            )

        characteristics = self.analyzer.analyze(raster)
        sequence = self.sequencer.sequence(
            original_format,
            options.output_format,
            characteristics.has_transparency,
            characteristics.is_photo,
        )
        return _RunContext(raster=raster, characteristics=characteristics, sequence=sequence)

    def _search(
        self, raster: RasterImage, fmt: ImageFormat, options: ProcessingOptions
    ) -> SearchOutcome:
        return self.search_engine.find_encoding(
            raster,
            fmt,
            options.target_size_bytes,
            options.quality,
            options.lower_bound_tolerance,
            options.effective_upper_tolerance,
            options.strict_upper_limit,
            options.compression_level,
        )

    def _build_result(
        self,
        run: _RunContext,
        options: ProcessingOptions,
        outcome: SearchOutcome,
        outcomes: Sequence[SearchOutcome],
        start_time: float,
    ) -> EncodeResult:
        attempt = outcome.attempt
        result = EncodeResult(
            format=attempt.format,
            quality=attempt.quality,
            data=attempt.data,
            size=attempt.size,
            width=run.raster.width,
            height=run.raster.height,
            target_size_bytes=options.target_size_bytes,
            sequence=run.sequence,
            tolerance_used=attempt.reduction_percent,
            probes=sum(o.probes for o in outcomes),
            characteristics=run.characteristics,
            processing_time=time.time() - start_time,
        )
        logger.info(
            "Processing complete",
            format=result.format.value,
            quality=result.quality,
            size=result.size,
            percent_of_target=round(result.percent_of_target, 1),
            probes=result.probes,
        )
        return result

    def _no_viable_encoding(
        self, sequence: CandidateSequence, options: ProcessingOptions
    ) -> NoViableEncodingError:
        tried = [fmt.value for fmt in sequence]
        logger.error("No viable encoding", sequence=tried)
        return NoViableEncodingError(
            "Failed to find a valid compression solution that meets the target size "
            "constraint. Try a larger target size or a different format.",
            details={
                "sequence": tried,
                "target_size_bytes": options.target_size_bytes,
                "lower_bound_tolerance": options.lower_bound_tolerance,
                "upper_bound_tolerance": options.effective_upper_tolerance,
                "strict_upper_limit": options.strict_upper_limit,
            },
        )

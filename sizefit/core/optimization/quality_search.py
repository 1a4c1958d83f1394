"""Adaptive quality search toward a target file size."""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from sizefit.core.constants import (
    MAX_LOWER_TOLERANCE_PERCENT,
    MAX_PROBES_PER_LEVEL,
    MAX_QUALITY,
    MIN_QUALITY,
    TOLERANCE_STEP_PERCENT,
)
from sizefit.core.encoding.encoder import Encoder
from sizefit.core.exceptions import EncodeError
from sizefit.core.raster import RasterImage
from sizefit.models.processing import ImageFormat
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)


class SearchState(Enum):
    """Lifecycle of a search."""

    SEARCHING = "searching"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class WindowPosition(Enum):
    """Where an encoded size falls relative to the target window."""

    BELOW = "below"
    WITHIN = "within"
    ABOVE = "above"


@dataclass(frozen=True)
class ToleranceWindow:
    """Accepted byte-size range for one relaxation level."""

    target: int
    reduction_percent: int
    lower: float
    upper: float

    @classmethod
    def build(
        cls,
        target: int,
        reduction_percent: int,
        upper_tolerance_percent: int,
        strict: bool,
    ) -> "ToleranceWindow":
        lower = target * (1 - reduction_percent / 100)
        upper = target if strict else target * (1 + upper_tolerance_percent / 100)
        return cls(
            target=target,
            reduction_percent=reduction_percent,
            lower=lower,
            upper=float(upper),
        )

    def classify(self, size: int) -> WindowPosition:
        if size > self.upper:
            return WindowPosition.ABOVE
        if size < self.lower:
            return WindowPosition.BELOW
        return WindowPosition.WITHIN


def tolerance_levels(lower_tolerance_percent: int) -> List[int]:
    """Lower-bound reductions to try, in 5% steps up to 50%."""
    return list(
        range(
            lower_tolerance_percent,
            MAX_LOWER_TOLERANCE_PERCENT + 1,
            TOLERANCE_STEP_PERCENT,
        )
    )


@dataclass(frozen=True)
class EncodeAttempt:
    """One encode probe."""

    format: ImageFormat
    quality: int
    size: int
    data: bytes = field(repr=False)
    reduction_percent: Optional[int] = None


class BinarySearch:
    """Binary search over quality for a single tolerance window.

    Call ``next_quality`` to get the quality to probe and ``record`` with the
    result. The search ends when ``max_probes`` is reached or the range is
    empty; with an in-window result it also ends once the range is at most
    one wide.
    """

    def __init__(self, initial_quality: int, max_probes: int = MAX_PROBES_PER_LEVEL):
        self.floor = MIN_QUALITY
        self.ceiling = MAX_QUALITY
        self.current = max(MIN_QUALITY, min(MAX_QUALITY, initial_quality))
        self.max_probes = max_probes
        self.probes = 0
        self.best: Optional[EncodeAttempt] = None
        self._state = SearchState.SEARCHING if max_probes > 0 else SearchState.EXHAUSTED

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def next_quality(self) -> int:
        return self.current

    def record(self, attempt: EncodeAttempt, position: WindowPosition) -> SearchState:
        """Feed back the size class of the last probe and advance the search."""
        if self._state is not SearchState.SEARCHING:
            raise RuntimeError(f"Search already finished ({self._state.value})")

        self.probes += 1
        quality = attempt.quality

        if position is WindowPosition.WITHIN:
            # Prefer the highest in-window quality, keep looking upward
            if self.best is None or quality > self.best.quality:
                self.best = attempt
            self.floor = quality
            self.current = min(math.ceil((quality + self.ceiling) / 2), MAX_QUALITY)
        elif position is WindowPosition.ABOVE:
            self.ceiling = quality - 1
            self.current = max(math.floor((self.floor + self.ceiling) / 2), MIN_QUALITY)
        else:
            self.floor = quality + 1
            self.current = min(math.ceil((self.floor + self.ceiling) / 2), MAX_QUALITY)

        if self._is_finished():
            self._state = (
                SearchState.CONVERGED if self.best is not None else SearchState.EXHAUSTED
            )
        return self._state

    def _is_finished(self) -> bool:
        if self.probes >= self.max_probes:
            return True
        if self.ceiling < self.floor:
            return True
        return self.best is not None and self.ceiling - self.floor <= 1


@dataclass
class SearchOutcome:
    """Result of searching one format."""

    format: ImageFormat
    state: SearchState
    attempt: Optional[EncodeAttempt] = None
    attempts: List[EncodeAttempt] = field(default_factory=list)
    levels_tried: List[int] = field(default_factory=list)
    last_resort: bool = False
    error: Optional[str] = None
    total_time: float = 0.0

    @property
    def found(self) -> bool:
        return self.attempt is not None

    @property
    def probes(self) -> int:
        return len(self.attempts)


class QualitySearchEngine:
    """Finds the highest quality whose encoded size lands in the target window.

    The lower bound of the window is relaxed in 5% steps up to 50% when a
    level yields nothing; the upper bound never moves. Encode failures
    abandon the format instead of propagating.
    """

    def __init__(self, encoder: Encoder, max_probes: int = MAX_PROBES_PER_LEVEL):
        self.encoder = encoder
        self.max_probes = max_probes

    def find_encoding(
        self,
        raster: RasterImage,
        fmt: ImageFormat,
        target_bytes: int,
        initial_quality: int,
        lower_tolerance_percent: int,
        upper_tolerance_percent: int,
        strict: bool,
        effort: int,
    ) -> SearchOutcome:
        """Search one format.

        Args:
            raster: Raster to encode (not modified)
            fmt: Output format
            target_bytes: Target size in bytes
            initial_quality: First quality to probe
            lower_tolerance_percent: Starting lower-bound reduction
            upper_tolerance_percent: Upper tolerance (ignored when strict)
            strict: Never accept sizes above the target
            effort: Codec effort level

        Returns:
            SearchOutcome; ``attempt`` is None when the format is not viable
        """
        start_time = time.time()
        outcome = SearchOutcome(format=fmt, state=SearchState.SEARCHING)
        levels = tolerance_levels(lower_tolerance_percent)

        for reduction in levels:
            window = ToleranceWindow.build(
                target_bytes, reduction, upper_tolerance_percent, strict
            )
            outcome.levels_tried.append(reduction)
            logger.debug(
                "Trying tolerance level",
                format=fmt.value,
                reduction_percent=reduction,
                lower=int(window.lower),
                upper=int(window.upper),
            )

            search = BinarySearch(initial_quality, self.max_probes)
            try:
                while search.state is SearchState.SEARCHING:
                    attempt = self._probe(raster, fmt, search.next_quality, effort, reduction)
                    outcome.attempts.append(attempt)
                    search.record(attempt, window.classify(attempt.size))
            except EncodeError as e:
                return self._abandon(outcome, e, start_time)

            if search.best is not None:
                return self._finish(outcome, search.best, start_time)

            # Relaxation ceiling reached: one probe at minimum quality
            if reduction >= MAX_LOWER_TOLERANCE_PERCENT:
                try:
                    attempt = self._probe(raster, fmt, MIN_QUALITY, effort, reduction)
                except EncodeError as e:
                    return self._abandon(outcome, e, start_time)
                outcome.attempts.append(attempt)
                if attempt.size <= window.upper:
                    outcome.last_resort = True
                    return self._finish(outcome, attempt, start_time)

        outcome.state = SearchState.EXHAUSTED
        outcome.total_time = time.time() - start_time
        logger.info(
            "No encoding in target window",
            format=fmt.value,
            target=target_bytes,
            probes=outcome.probes,
        )
        return outcome

    def _probe(
        self,
        raster: RasterImage,
        fmt: ImageFormat,
        quality: int,
        effort: int,
        reduction: int,
    ) -> EncodeAttempt:
        data = self.encoder.encode(raster, fmt, quality, effort)
        logger.debug("Probe", format=fmt.value, quality=quality, size=len(data))
        return EncodeAttempt(
            format=fmt,
            quality=quality,
            size=len(data),
            data=data,
            reduction_percent=reduction,
        )

    def _finish(
        self, outcome: SearchOutcome, attempt: EncodeAttempt, start_time: float
    ) -> SearchOutcome:
        outcome.attempt = attempt
        outcome.state = SearchState.CONVERGED
        outcome.total_time = time.time() - start_time
        logger.info(
            "Encoding found",
            format=attempt.format.value,
            quality=attempt.quality,
            size=attempt.size,
            reduction_percent=attempt.reduction_percent,
            probes=outcome.probes,
            last_resort=outcome.last_resort,
        )
        return outcome

    def _abandon(
        self, outcome: SearchOutcome, error: EncodeError, start_time: float
    ) -> SearchOutcome:
        outcome.state = SearchState.EXHAUSTED
        outcome.error = error.message
        outcome.total_time = time.time() - start_time
        logger.warning(
            "Format abandoned after encode failure",
            format=outcome.format.value,
            error_code=error.error_code,
            error=error.message,
        )
        return outcome

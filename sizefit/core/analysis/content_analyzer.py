"""Pixel-sampling analysis of raster content."""

from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from sizefit.core.constants import (
    EDGE_DIFF_THRESHOLD,
    GRADIENT_DIFF_THRESHOLD,
    MAX_CLASSIFICATION_SAMPLES,
    OPAQUE_ALPHA,
    PHOTO_UNIQUE_COLOR_RATIO,
    TRANSPARENCY_SAMPLE_DIVISOR,
)
from sizefit.core.raster import RasterImage
from sizefit.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SamplingStats:
    """Statistics gathered from the classification sample."""

    samples: int
    unique_colors: int
    edge_count: int
    gradient_count: int

    @property
    def unique_color_ratio(self) -> float:
        return self.unique_colors / self.samples if self.samples else 0.0

    @property
    def edge_ratio(self) -> float:
        return self.edge_count / self.samples if self.samples else 0.0

    @property
    def gradient_ratio(self) -> float:
        return self.gradient_count / self.samples if self.samples else 0.0


@dataclass(frozen=True)
class ContentCharacteristics:
    """Transparency and photo/graphic classification of one raster."""

    has_transparency: bool
    is_photo: bool
    unique_color_ratio: float = 0.0
    edge_ratio: float = 0.0
    gradient_ratio: float = 0.0


class ContentPolicy(Protocol):
    """Decides whether sampled statistics describe a photograph."""

    def is_photo(self, stats: SamplingStats) -> bool:
        ...


class ThresholdContentPolicy:
    """Photo when colors are varied and smooth gradients outnumber hard edges."""

    def __init__(self, min_unique_color_ratio: float = PHOTO_UNIQUE_COLOR_RATIO):
        self.min_unique_color_ratio = min_unique_color_ratio

    def is_photo(self, stats: SamplingStats) -> bool:
        return (
            stats.unique_color_ratio > self.min_unique_color_ratio
            and stats.gradient_ratio > stats.edge_ratio
        )


class ContentAnalyzer:
    """Samples a raster for transparency and photographic content.

    Both checks are statistical: transparency looks at roughly 1% of the
    pixels and classification at up to 10,000, so a transparent pixel that
    falls between samples is missed. Results are deterministic for a given
    raster.
    """

    def __init__(
        self,
        policy: Optional[ContentPolicy] = None,
        edge_threshold: int = EDGE_DIFF_THRESHOLD,
        gradient_threshold: int = GRADIENT_DIFF_THRESHOLD,
        max_samples: int = MAX_CLASSIFICATION_SAMPLES,
    ):
        self.policy = policy or ThresholdContentPolicy()
        self.edge_threshold = edge_threshold
        self.gradient_threshold = gradient_threshold
        self.max_samples = max_samples

    def analyze(self, raster: RasterImage) -> ContentCharacteristics:
        """Analyze a raster.

        Args:
            raster: Decoded RGBA raster

        Returns:
            ContentCharacteristics for the raster
        """
        flat = raster.pixels.reshape(-1, 4)

        has_transparency = self.detect_transparency(flat)
        stats = self.sample_statistics(flat)
        is_photo = bool(self.policy.is_photo(stats))

        logger.debug(
            "Content analyzed",
            has_transparency=has_transparency,
            is_photo=is_photo,
            samples=stats.samples,
            unique_color_ratio=round(stats.unique_color_ratio, 4),
            edge_ratio=round(stats.edge_ratio, 4),
            gradient_ratio=round(stats.gradient_ratio, 4),
        )

        return ContentCharacteristics(
            has_transparency=has_transparency,
            is_photo=is_photo,
            unique_color_ratio=stats.unique_color_ratio,
            edge_ratio=stats.edge_ratio,
            gradient_ratio=stats.gradient_ratio,
        )

    def detect_transparency(self, flat: np.ndarray) -> bool:
        """Check ~1% of pixels at a fixed stride for alpha below 255."""
        total = flat.shape[0]
        sample_count = max(1, total // TRANSPARENCY_SAMPLE_DIVISOR)
        stride = max(1, total // sample_count)

        alpha = flat[::stride, 3]
        return bool(np.any(alpha < OPAQUE_ALPHA))

    def sample_statistics(self, flat: np.ndarray) -> SamplingStats:
        """Count unique colors, edges and gradients over a strided sample.

        Each sample is compared with the next one, so only samples that have
        a successor are counted.
        """
        total = flat.shape[0]
        stride = max(1, total // min(total, self.max_samples))

        indices = np.arange(0, total, stride)
        indices = indices[indices + stride < total]
        if indices.size == 0:
            return SamplingStats(samples=0, unique_colors=0, edge_count=0, gradient_count=0)

        current = flat[indices, :3].astype(np.int16)
        following = flat[indices + stride, :3].astype(np.int16)
        diff = np.abs(current - following).sum(axis=1)

        edges = diff > self.edge_threshold
        gradients = (diff > self.gradient_threshold) & ~edges

        unique_colors = np.unique(flat[indices, :3], axis=0).shape[0]

        return SamplingStats(
            samples=int(indices.size),
            unique_colors=int(unique_colors),
            edge_count=int(np.count_nonzero(edges)),
            gradient_count=int(np.count_nonzero(gradients)),
        )

"""Content analysis for format selection."""

from .content_analyzer import (
    ContentAnalyzer,
    ContentCharacteristics,
    ContentPolicy,
    SamplingStats,
    ThresholdContentPolicy,
)

__all__ = [
    "ContentAnalyzer",
    "ContentCharacteristics",
    "ContentPolicy",
    "SamplingStats",
    "ThresholdContentPolicy",
]

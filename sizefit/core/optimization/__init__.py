"""Size-constrained optimization."""

from .orchestrator import EncodeResult, SizeConstrainedOptimizer
from .quality_search import (
    BinarySearch,
    EncodeAttempt,
    QualitySearchEngine,
    SearchOutcome,
    SearchState,
    ToleranceWindow,
    WindowPosition,
    tolerance_levels,
)

__all__ = [
    "BinarySearch",
    "EncodeAttempt",
    "EncodeResult",
    "QualitySearchEngine",
    "SearchOutcome",
    "SearchState",
    "SizeConstrainedOptimizer",
    "ToleranceWindow",
    "WindowPosition",
    "tolerance_levels",
]

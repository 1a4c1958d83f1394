"""Human-readable byte sizes."""

import math
import re

from sizefit.core.constants import DEFAULT_TARGET_RATIO

_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024 * 1024, "GB": 1024 * 1024 * 1024}
_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([KMG]?B)?\s*$", re.IGNORECASE)


def parse_size(value: str) -> int:
    """Parse sizes like ``"200KB"``, ``"1.5 MB"`` or ``"50000"`` into bytes.

    Units are 1024-based; the result is rounded to the nearest byte.

    Raises:
        ValueError: If the string is not a positive size
    """
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid size: {value!r} (use e.g. 200KB, 1.5MB)")

    number = float(match.group(1))
    unit = (match.group(2) or "").upper()
    size = math.floor(number * _UNITS[unit] + 0.5)
    if size <= 0:
        raise ValueError(f"Size must be positive: {value!r}")
    return size


def format_bytes(size: int, decimals: int = 2) -> str:
    """Format a byte count, e.g. ``1536 -> "1.5 KB"``."""
    if size == 0:
        return "0 Bytes"

    units = ["Bytes", "KB", "MB", "GB"]
    exponent = 0
    while size >= 1024 ** (exponent + 1) and exponent < len(units) - 1:
        exponent += 1

    places = max(0, decimals)
    text = f"{size / 1024**exponent:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {units[exponent]}"


def default_target_size(source_size: int) -> int:
    """Default target: 70% of the source size."""
    return math.floor(source_size * DEFAULT_TARGET_RATIO + 0.5)

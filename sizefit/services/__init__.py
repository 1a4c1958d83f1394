"""Application services."""

from .resize_service import ResizeService, optimize_bytes, validate_options

__all__ = ["ResizeService", "optimize_bytes", "validate_options"]

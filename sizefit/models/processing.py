"""Data models for size-constrained processing."""

from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from sizefit.core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_LOWER_TOLERANCE_PERCENT,
    DEFAULT_QUALITY,
    DEFAULT_UPPER_TOLERANCE_PERCENT,
    FORMAT_EXTENSIONS,
    FORMAT_MIME_TYPES,
    MAX_COMPRESSION_LEVEL,
    MAX_QUALITY,
    MAX_UPPER_TOLERANCE_PERCENT,
    MIN_COMPRESSION_LEVEL,
    MIN_LOWER_TOLERANCE_PERCENT,
    MIN_QUALITY,
)
from sizefit.core.exceptions import InvalidOptionsError


class ImageFormat(str, Enum):
    """Formats the optimizer can emit."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"

    @property
    def extension(self) -> str:
        return FORMAT_EXTENSIONS[self.value]

    @property
    def mime_type(self) -> str:
        return FORMAT_MIME_TYPES[self.value]

    @property
    def supports_alpha(self) -> bool:
        return self is not ImageFormat.JPEG

    @classmethod
    def from_declared_type(cls, declared: Optional[str]) -> Optional["ImageFormat"]:
        """Resolve a MIME type, Pillow format name or extension to a format family.

        Matching is by lower-cased substring, so ``"image/png"``, ``"PNG"`` and
        ``"jpg"`` all resolve. Returns None for anything else.
        """
        if not declared:
            return None

        lowered = declared.lower()
        if "png" in lowered:
            return cls.PNG
        if "jpeg" in lowered or "jpg" in lowered:
            return cls.JPEG
        if "webp" in lowered:
            return cls.WEBP
        if "avif" in lowered:
            return cls.AVIF
        return None


class OutputFormat(str, Enum):
    """Output format requested by the caller."""

    AUTO = "auto"
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"

    def to_image_format(self) -> Optional[ImageFormat]:
        """Concrete format, or None for ``auto``."""
        if self is OutputFormat.AUTO:
            return None
        return ImageFormat(self.value)


class ProcessingOptions(BaseModel):
    """Caller-supplied options for one processing run."""

    model_config = ConfigDict(frozen=True)

    target_size_bytes: int = Field(gt=0, description="Target output size in bytes")
    output_format: OutputFormat = Field(
        default=OutputFormat.AUTO, description="Requested output format"
    )
    quality: int = Field(
        default=DEFAULT_QUALITY,
        ge=MIN_QUALITY,
        le=MAX_QUALITY,
        description="Initial quality hint (1-100)",
    )
    max_width: Optional[int] = Field(default=None, gt=0, description="Maximum width")
    max_height: Optional[int] = Field(default=None, gt=0, description="Maximum height")
    maintain_aspect_ratio: bool = Field(
        default=True, description="Preserve aspect ratio when resizing"
    )
    compression_level: int = Field(
        default=DEFAULT_COMPRESSION_LEVEL,
        ge=MIN_COMPRESSION_LEVEL,
        le=MAX_COMPRESSION_LEVEL,
        description="Encoder effort (0-9, codec specific)",
    )
    lower_bound_tolerance: int = Field(
        default=DEFAULT_LOWER_TOLERANCE_PERCENT,
        ge=MIN_LOWER_TOLERANCE_PERCENT,
        description="Percent below target still accepted",
    )
    strict_upper_limit: bool = Field(
        default=False, description="Never exceed the target size"
    )
    upper_bound_tolerance: int = Field(
        default=DEFAULT_UPPER_TOLERANCE_PERCENT,
        description="Percent above target still accepted",
    )

    @field_validator("output_format", mode="before")
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        """Accept ``jpg`` and upper-case names."""
        if isinstance(v, str):
            v = v.strip().lower()
            if v == "jpg":
                return "jpeg"
        return v

    @field_validator("upper_bound_tolerance")
    @classmethod
    def check_upper_tolerance(cls, v: int, info: ValidationInfo) -> int:
        """Upper tolerance must be 0-50 unless the strict limit overrides it."""
        if not info.data.get("strict_upper_limit") and not (
            0 <= v <= MAX_UPPER_TOLERANCE_PERCENT
        ):
            raise ValueError(f"must be between 0 and {MAX_UPPER_TOLERANCE_PERCENT}")
        return v

    @property
    def effective_upper_tolerance(self) -> int:
        """Upper tolerance actually applied; zero under a strict upper limit."""
        return 0 if self.strict_upper_limit else self.upper_bound_tolerance

    @property
    def upper_bound_bytes(self) -> float:
        return self.target_size_bytes * (1 + self.effective_upper_tolerance / 100)

    @classmethod
    def create(cls, **values: Any) -> "ProcessingOptions":
        """Build options, reporting constraint violations as InvalidOptionsError."""
        try:
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            field_name = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidOptionsError(
                f"Invalid processing options: {field_name}: {first.get('msg')}",
                details={
                    "field_name": field_name,
                    "field_value": values.get(field_name),
                    "constraints": first.get("msg", ""),
                },
            ) from e

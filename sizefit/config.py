from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sizefit.core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_LOWER_TOLERANCE_PERCENT,
    DEFAULT_QUALITY,
    DEFAULT_UPPER_TOLERANCE_PERCENT,
    MAX_IMAGE_PIXELS,
    MIN_TARGET_SIZE_BYTES,
)


class Settings(BaseSettings):
    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(
        default=False, description="Render log events as JSON lines"
    )

    # Processing defaults
    default_quality: int = Field(
        default=DEFAULT_QUALITY, ge=1, le=100, description="Initial quality hint"
    )
    default_compression_level: int = Field(
        default=DEFAULT_COMPRESSION_LEVEL,
        ge=0,
        le=9,
        description="Encoder effort level (0-9)",
    )
    default_lower_tolerance: int = Field(
        default=DEFAULT_LOWER_TOLERANCE_PERCENT,
        ge=10,
        description="Lower bound tolerance percent",
    )
    default_upper_tolerance: int = Field(
        default=DEFAULT_UPPER_TOLERANCE_PERCENT,
        ge=0,
        le=50,
        description="Upper bound tolerance percent",
    )

    # Limits
    min_target_size_bytes: int = Field(
        default=MIN_TARGET_SIZE_BYTES, ge=1, description="Smallest accepted target"
    )
    max_image_pixels: int = Field(
        default=MAX_IMAGE_PIXELS, description="Decompression bomb guard"
    )

    # Performance
    max_concurrent_formats: int = Field(
        default=4, ge=1, description="Format searches run at once in parallel mode"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="SIZEFIT_",
        extra="ignore",
    )


settings = Settings()

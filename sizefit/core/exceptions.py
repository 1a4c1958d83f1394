from typing import Dict, List, Optional, TypedDict, Union


class DecodeDetails(TypedDict, total=False):
    """Type-safe details for decode errors."""

    mime_type: str
    data_size: int
    reason: str


class EncodeDetails(TypedDict, total=False):
    """Type-safe details for encode errors."""

    format: str
    quality: int
    effort: int
    dimensions: tuple[int, int]
    error: str


class SearchDetails(TypedDict, total=False):
    """Type-safe details for exhausted searches."""

    sequence: List[str]
    target_size_bytes: int
    lower_bound_tolerance: int
    upper_bound_tolerance: int
    strict_upper_limit: bool


class OptionsDetails(TypedDict, total=False):
    """Type-safe details for invalid processing options."""

    field_name: str
    field_value: Union[str, int, float, bool, None]
    constraints: str


ErrorDetails = Union[
    DecodeDetails,
    EncodeDetails,
    SearchDetails,
    OptionsDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],
]


class SizeFitError(Exception):
    """Base exception for all sizefit errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[ErrorDetails] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidOptionsError(SizeFitError):
    """Raised when processing options violate their constraints."""

    def __init__(self, message: str, details: Optional[OptionsDetails] = None):
        super().__init__(message=message, error_code="SF001", details=details)


class DecodeError(SizeFitError):
    """Raised when source image data cannot be decoded."""

    def __init__(self, message: str, details: Optional[DecodeDetails] = None):
        super().__init__(message=message, error_code="SF101", details=details)


class EncodeError(SizeFitError):
    """Raised when a single encode call fails."""

    def __init__(
        self,
        message: str,
        details: Optional[EncodeDetails] = None,
        error_code: str = "SF201",
    ):
        super().__init__(message=message, error_code=error_code, details=details)


class UnsupportedFormatError(EncodeError):
    """Raised when no encoder is available for a format on this host."""

    def __init__(self, message: str, details: Optional[EncodeDetails] = None):
        super().__init__(message=message, details=details, error_code="SF202")


class NoViableEncodingError(SizeFitError):
    """Raised when every candidate format failed to reach the target window."""

    def __init__(self, message: str, details: Optional[SearchDetails] = None):
        super().__init__(message=message, error_code="SF301", details=details)

    @property
    def sequence(self) -> List[str]:
        """Formats that were tried, in order."""
        return list(self.details.get("sequence", []))

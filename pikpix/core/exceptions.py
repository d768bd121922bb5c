from typing import Dict, List, Optional, TypedDict, Union


class ConfigDetails(TypedDict, total=False):
    """Type-safe details for configuration errors."""

    config_key: str
    config_value: Union[str, int, float, bool]
    valid_options: List[str]


class SourceDetails(TypedDict, total=False):
    """Type-safe details for input resolution errors."""

    source: str
    mime_type: str
    status_code: int
    reason: str


class ParameterDetails(TypedDict, total=False):
    """Type-safe details for invalid parameter errors."""

    field_name: str
    field_value: Union[str, int, float, bool]
    constraints: str


class CodecDetails(TypedDict, total=False):
    """Type-safe details for codec errors."""

    format: str
    operation: str
    error: str
    reason: str


# Union type for all possible error details
ErrorDetails = Union[
    ConfigDetails,
    SourceDetails,
    ParameterDetails,
    CodecDetails,
    Dict[str, Union[str, int, float, bool, List[str]]],  # Fallback for edge cases
]


class PikPixError(Exception):
    """Base exception for all PikPix errors."""

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


class ConfigurationError(PikPixError):
    """Raised when the command-line options are missing or invalid."""

    def __init__(self, message: str, details: Optional[ConfigDetails] = None):
        super().__init__(message=message, error_code="CFG001", details=details)


class NotFoundError(PikPixError):
    """Raised when the input path does not exist and is not a URL."""

    def __init__(
        self,
        message: str = "Input path does not exist.",
        details: Optional[SourceDetails] = None,
    ):
        super().__init__(message=message, error_code="SRC001", details=details)


class NetworkError(PikPixError):
    """Raised when fetching a remote image fails."""

    def __init__(self, message: str, details: Optional[SourceDetails] = None):
        super().__init__(message=message, error_code="NET001", details=details)


class InvalidImageError(PikPixError):
    """Raised when the sniffed content is not an image."""

    def __init__(self, message: str, details: Optional[SourceDetails] = None):
        super().__init__(message=message, error_code="IMG001", details=details)


class InvalidParameterError(PikPixError):
    """Raised when a transform parameter (resize, blur, compression, ...) is invalid."""

    def __init__(self, message: str, details: Optional[ParameterDetails] = None):
        super().__init__(message=message, error_code="PRM001", details=details)


class CodecError(PikPixError):
    """Raised when the image library rejects a decode, transform or encode."""

    def __init__(self, message: str, details: Optional[CodecDetails] = None):
        super().__init__(message=message, error_code="COD001", details=details)

"""Data models for image conversion requests."""

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pikpix.core.constants import (
    DEFAULT_FLATTEN_COLOR,
    REMOTE_SCHEMES,
    SUPPORTED_FORMATS,
)
from pikpix.core.conversion.formats.registry import format_registry
from pikpix.core.exceptions import ConfigurationError


class FlattenMode(str, Enum):
    """How the flatten step was requested."""

    UNSET = "unset"
    DEFAULT = "default"
    EXPLICIT = "explicit"


class FlattenOption(BaseModel):
    """Tagged variant for the ``--flatten [color]`` flag."""

    model_config = ConfigDict(frozen=True)

    mode: FlattenMode = FlattenMode.UNSET
    color: Optional[str] = None

    @classmethod
    def unset(cls) -> "FlattenOption":
        return cls(mode=FlattenMode.UNSET)

    @classmethod
    def default(cls) -> "FlattenOption":
        return cls(mode=FlattenMode.DEFAULT)

    @classmethod
    def explicit(cls, color: str) -> "FlattenOption":
        return cls(mode=FlattenMode.EXPLICIT, color=color)

    @property
    def enabled(self) -> bool:
        return self.mode != FlattenMode.UNSET

    @property
    def background(self) -> Optional[str]:
        """Background colour to flatten onto, or None when flatten is off."""
        if self.mode == FlattenMode.EXPLICIT:
            return self.color
        if self.mode == FlattenMode.DEFAULT:
            return DEFAULT_FLATTEN_COLOR
        return None


class ConversionRequest(BaseModel):
    """Validated, immutable configuration for one conversion run.

    Compression, resize, blur, subsample and ROI values are carried as given;
    the pipeline builder checks them for every item so that a bad value fails
    each item rather than the whole run.
    """

    model_config = ConfigDict(frozen=True)

    input: str = Field(..., description="Input file, URL or directory")
    output: str = Field(..., description="Output file or directory")
    format: str = Field(..., description="Canonical output format")
    compression: Optional[int] = Field(None, description="Compression level (0-100)")
    resize: Optional[str] = Field(None, description="Resize target as WIDTHxHEIGHT")
    flatten: FlattenOption = Field(default_factory=FlattenOption.unset)
    sharpen: bool = False
    denoise: bool = False
    grayscale: bool = False
    blur: Optional[float] = Field(None, description="Gaussian blur sigma")
    auto_optimize: bool = False
    preserve_aspect_ratio: bool = False
    lossless: bool = False
    progressive: bool = False
    subsample: Optional[str] = Field(None, description="JPEG chroma subsampling rate")
    adaptive_quantization: bool = False
    roi_compression: Optional[str] = Field(
        None, description="Regions as x:y:width:height:quality, comma separated"
    )

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Ensure format is a canonical registry member."""
        canonical = format_registry.canonicalize(v)
        if not format_registry.is_supported_format(canonical):
            raise ValueError(f"Unsupported format: {v}")
        return canonical

    @property
    def is_remote(self) -> bool:
        return self.input.startswith(REMOTE_SCHEMES)


def _flatten_from_raw(value: Any) -> FlattenOption:
    if isinstance(value, FlattenOption):
        return value
    if value is None or value is False:
        return FlattenOption.unset()
    if value is True:
        return FlattenOption.default()
    text = str(value).strip()
    if not text:
        return FlattenOption.default()
    return FlattenOption.explicit(text)


def validate_options(raw: Mapping[str, Any]) -> ConversionRequest:
    """Turn a raw flag bag into a ConversionRequest.

    Args:
        raw: Parsed command-line flags keyed by option name

    Returns:
        The validated request

    Raises:
        ConfigurationError: If input, output or format is missing, or the
            format is not supported
    """
    input_path = raw.get("input")
    output_path = raw.get("output")
    format_name = raw.get("format")

    if not input_path or not output_path or not format_name:
        raise ConfigurationError(
            "Please specify input, output, and format.",
            details={"valid_options": ["input", "output", "format"]},
        )

    canonical = format_registry.canonicalize(str(format_name))
    if not format_registry.is_supported_format(canonical):
        raise ConfigurationError(
            "Unsupported format specified. Supported formats are "
            f"{', '.join(SUPPORTED_FORMATS)}.",
            details={
                "config_key": "format",
                "config_value": str(format_name),
                "valid_options": list(SUPPORTED_FORMATS),
            },
        )

    return ConversionRequest(
        input=str(input_path),
        output=str(output_path),
        format=canonical,
        compression=raw.get("compression"),
        resize=raw.get("resize"),
        flatten=_flatten_from_raw(raw.get("flatten")),
        sharpen=bool(raw.get("sharpen")),
        denoise=bool(raw.get("denoise")),
        grayscale=bool(raw.get("grayscale")),
        blur=raw.get("blur"),
        auto_optimize=bool(raw.get("auto_optimize")),
        preserve_aspect_ratio=bool(raw.get("preserve_aspect_ratio")),
        lossless=bool(raw.get("lossless")),
        progressive=bool(raw.get("progressive")),
        subsample=raw.get("subsample"),
        adaptive_quantization=bool(raw.get("adaptive_quantization")),
        roi_compression=raw.get("roi_compression"),
    )

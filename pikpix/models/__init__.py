"""Data models for the image converter."""

from pikpix.models.conversion import (
    ConversionRequest,
    FlattenMode,
    FlattenOption,
    validate_options,
)

__all__ = [
    "ConversionRequest",
    "FlattenMode",
    "FlattenOption",
    "validate_options",
]

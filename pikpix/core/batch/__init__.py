"""Batch processing module for converting one item or a directory of images."""

from .models import BatchResult, ItemResult

__all__ = [
    "BatchResult",
    "ItemResult",
]

"""Data models for batch processing."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ItemStatus(str, Enum):
    """Outcome of an individual item in a run."""

    COMPLETED = "completed"
    FAILED = "failed"


class ItemResult(BaseModel):
    """Outcome for one processed input."""

    name: str = Field(..., description="Entry name or the input specifier")
    source: str = Field(..., description="Path or URL that was read")
    status: ItemStatus
    output_path: Optional[str] = Field(None, description="Written file on success")
    error: Optional[str] = Field(None, description="Error message on failure")
    error_code: Optional[str] = Field(None, description="Error code on failure")
    warnings: List[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == ItemStatus.COMPLETED


class BatchResult(BaseModel):
    """All item outcomes of one run, in processing order."""

    directory_mode: bool = Field(
        default=False, description="Whether the input was a directory"
    )
    items: List[ItemResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[ItemResult]:
        return [item for item in self.items if item.succeeded]

    @property
    def failed(self) -> List[ItemResult]:
        return [item for item in self.items if not item.succeeded]

    @property
    def total(self) -> int:
        return len(self.items)

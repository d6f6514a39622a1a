"""Normalized record models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TimestampStrategy(str, Enum):
    """How a record timestamp is derived during stream parsing."""

    PAYLOAD = "payload"
    SYNTHETIC = "synthetic"


class ConvertFormat(str, Enum):
    """Input format accepted by the HTTP and tool adapters."""

    SINGLE = "single"
    MULTIPLE = "multiple"
    OBJECT = "object"


class NormalizedRecord(BaseModel):
    """Replay record: one canonical SSE block and its timestamp.

    The timestamp is kept as a string so epoch values coming from
    upstream systems round-trip without precision loss.
    """

    timestamp: str = Field(description="Epoch milliseconds as a string")
    value: str = Field(description="Canonical 'event:...\\ndata:...\\n\\n' block")


class BatchItemError(BaseModel):
    """Failure for a single batch item."""

    index: int = Field(description="Position of the item in the input list")
    item: Any = Field(default=None, description="Original item")
    error: str = Field(description="Error message")


class BatchResult(BaseModel):
    """Outcome of a batch conversion."""

    data: list[NormalizedRecord] = Field(default_factory=list)
    total_items: int = Field(description="Number of input items")
    success_count: int = Field(default=0, description="Items converted without error")
    error_count: int = Field(default=0, description="Items that failed")
    record_count: int = Field(default=0, description="Records produced across all items")
    errors: list[BatchItemError] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.error_count == 0


class PresetFile(BaseModel):
    """Rendered preset-data file."""

    filename: str
    content: str = Field(description="Pretty-printed JSON array")
    item_count: int

"""Normalizers for converting SSE streams and event objects to replay records."""

from .sse import (
    convert_from_object,
    convert_multiple_sse_events,
    convert_sse_data,
    extract_timestamp,
    format_sse_value,
)
from .batch import convert_batch, convert_by_format, parse_object

__all__ = [
    "convert_from_object",
    "convert_multiple_sse_events",
    "convert_sse_data",
    "extract_timestamp",
    "format_sse_value",
    "convert_batch",
    "convert_by_format",
    "parse_object",
]

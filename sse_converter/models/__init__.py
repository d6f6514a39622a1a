"""Data models for records, batch results and configuration."""

from .record import (
    BatchItemError,
    BatchResult,
    ConvertFormat,
    NormalizedRecord,
    PresetFile,
    TimestampStrategy,
)
from .config import ConverterConfig, IncrementConfig, PresetConfig, ServerConfig

__all__ = [
    "BatchItemError",
    "BatchResult",
    "ConvertFormat",
    "NormalizedRecord",
    "PresetFile",
    "TimestampStrategy",
    "ConverterConfig",
    "IncrementConfig",
    "PresetConfig",
    "ServerConfig",
]

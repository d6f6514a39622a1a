"""Configuration models for the converter and its adapters."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from .record import TimestampStrategy


class IncrementConfig(BaseModel):
    """Synthetic timestamp spacing, in milliseconds."""

    min_ms: int = Field(default=100, ge=0)
    max_ms: int = Field(default=1100, ge=1)

    @model_validator(mode="after")
    def _check_range(self) -> "IncrementConfig":
        if self.max_ms <= self.min_ms:
            raise ValueError("max_ms must be greater than min_ms")
        return self


class ServerConfig(BaseModel):
    """HTTP service configuration."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class PresetConfig(BaseModel):
    """Preset-data output configuration."""

    output_dir: str = Field(default="preset-data")
    default_filename: str = Field(default="converted-data.json")


class ConverterConfig(BaseModel):
    """Top-level converter configuration."""

    timestamp_strategy: TimestampStrategy = Field(default=TimestampStrategy.PAYLOAD)
    increment: IncrementConfig = Field(default_factory=IncrementConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    preset: PresetConfig = Field(default_factory=PresetConfig)

    @classmethod
    def from_yaml(cls, data: dict[str, Any] | None) -> "ConverterConfig":
        """Create config from parsed YAML data."""
        data = data or {}
        config_data: dict[str, Any] = {
            "timestamp_strategy": data.get("timestamp_strategy"),
        }

        if "increment" in data:
            config_data["increment"] = IncrementConfig(**data["increment"])
        if "server" in data:
            config_data["server"] = ServerConfig(**data["server"])
        if "preset" in data:
            config_data["preset"] = PresetConfig(**data["preset"])

        # Filter out None values
        config_data = {k: v for k, v in config_data.items() if v is not None}

        return cls(**config_data)

    @property
    def increment_range(self) -> tuple[int, int]:
        return self.increment.min_ms, self.increment.max_ms

from pathlib import Path

import pytest
from pydantic import ValidationError

from sse_converter.config import load_config, load_settings
from sse_converter.models.config import ConverterConfig, IncrementConfig
from sse_converter.models.record import TimestampStrategy


def test_defaults() -> None:
    config = ConverterConfig.from_yaml({})

    assert config.timestamp_strategy is TimestampStrategy.PAYLOAD
    assert config.increment_range == (100, 1100)
    assert config.server.port == 3001
    assert config.preset.default_filename == "converted-data.json"


def test_load_settings_from_file(tmp_path: Path) -> None:
    path = tmp_path / "converter.yaml"
    path.write_text(
        "timestamp_strategy: synthetic\n"
        "increment:\n  min_ms: 10\n  max_ms: 20\n"
        "server:\n  port: 8080\n",
        encoding="utf-8",
    )

    config = load_settings(path)

    assert config.timestamp_strategy is TimestampStrategy.SYNTHETIC
    assert config.increment_range == (10, 20)
    assert config.server.port == 8080


def test_load_settings_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "converter.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == ConverterConfig()


def test_load_config_missing_points_to_sample() -> None:
    with pytest.raises(FileNotFoundError, match="nonexistent.sample.yaml"):
        load_config("nonexistent")


def test_increment_range_must_be_ordered() -> None:
    with pytest.raises(ValidationError):
        IncrementConfig(min_ms=500, max_ms=500)

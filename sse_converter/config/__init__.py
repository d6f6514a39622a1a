"""Configuration loading utilities."""

import logging
from pathlib import Path
from typing import Any

import yaml

from sse_converter.models.config import ConverterConfig

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_NAME = "converter"

logger = logging.getLogger(__name__)


def load_config(name: str) -> dict[str, Any]:
    """Load a YAML configuration file from the config directory.

    Args:
        name: Config file name without extension (e.g., 'converter')

    Returns:
        Parsed configuration dictionary

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the config file is invalid YAML
    """
    config_path = CONFIG_DIR / f"{name}.yaml"
    if not config_path.exists():
        sample_path = CONFIG_DIR / f"{name}.sample.yaml"
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please copy {sample_path} to {config_path} and fill in your values."
        )

    return load_config_file(config_path)


def load_config_file(path: Path | str) -> dict[str, Any]:
    """Load a YAML configuration file from an explicit path."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_settings(path: Path | str | None = None) -> ConverterConfig:
    """Build a ConverterConfig from an explicit file or the default config.

    An explicit path must exist. Without one, a missing default config
    yields the built-in defaults.
    """
    if path is not None:
        return ConverterConfig.from_yaml(load_config_file(path))

    try:
        data = load_config(DEFAULT_CONFIG_NAME)
    except FileNotFoundError:
        logger.debug(f"No {DEFAULT_CONFIG_NAME}.yaml in {CONFIG_DIR}, using defaults")
        return ConverterConfig()
    return ConverterConfig.from_yaml(data)

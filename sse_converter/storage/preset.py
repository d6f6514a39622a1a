"""Preset-data storage.

A preset file is a pretty-printed JSON array of replay records:

    preset-data/
      converted-data.json
      chat-stream.json
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel

from sse_converter.models.record import PresetFile
from sse_converter.serialization import dumps


logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "converted-data.json"


def _safe_filename(s: str) -> str:
    """Convert string to safe filename."""
    # Replace problematic characters
    for char in ['/', '\\', ':', '*', '?', '"', '<', '>', '|']:
        s = s.replace(char, '_')
    return s


def _to_jsonable(item: Any) -> Any:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    return item


def render_json(value: Any) -> str:
    """Render a record or plain value as 2-space indented JSON."""
    return dumps(_to_jsonable(value), option=orjson.OPT_INDENT_2).decode()


def render_records(items: Iterable[Any]) -> str:
    """Render records (models or plain dicts) as a JSON array."""
    return render_json([_to_jsonable(item) for item in items])


class PresetStorage:
    """Storage manager for preset-data files."""

    def __init__(self, base_dir: Path | str = "preset-data"):
        self.base_dir = Path(base_dir)

    def build_preset(
        self,
        items: list[Any],
        filename: str | None = None,
    ) -> PresetFile:
        """Render preset file content without touching the filesystem."""
        return PresetFile(
            filename=_safe_filename(filename or DEFAULT_FILENAME),
            content=render_records(items),
            item_count=len(items),
        )

    def save_preset(self, items: list[Any], filename: str | None = None) -> Path:
        """Write a preset file into the base directory."""
        preset = self.build_preset(items, filename)
        return write_text(self.base_dir / preset.filename, preset.content)


def write_records(items: list[Any], path: Path | str) -> Path:
    """Write records as a JSON array to an explicit path."""
    return write_text(Path(path), render_records(items))


def write_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)

    logger.info(f"Preset written: {path}")
    return path

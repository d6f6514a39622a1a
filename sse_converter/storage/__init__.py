"""Storage layer for preset-data files."""

from .preset import PresetStorage, render_json, render_records, write_records

__all__ = ["PresetStorage", "render_json", "render_records", "write_records"]

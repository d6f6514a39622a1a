"""MCP adapter for the converter."""

from .server import ConverterTools, create_server

__all__ = ["ConverterTools", "create_server"]

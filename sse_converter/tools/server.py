"""MCP tool server exposing the converter operations.

Each tool returns a readable summary with the JSON result embedded.
Failures are raised as ``ToolError`` so clients see ``isError``.
"""

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from sse_converter.errors import ConverterError
from sse_converter.models.config import ConverterConfig
from sse_converter.models.record import ConvertFormat
from sse_converter.normalizers import convert_by_format, convert_from_object
from sse_converter.storage import PresetStorage, render_json, render_records


logger = logging.getLogger(__name__)

SERVER_NAME = "sse-format-converter"


class ConverterTools:
    """Tool implementations bound to one configuration."""

    def __init__(self, settings: ConverterConfig | None = None):
        self.settings = settings or ConverterConfig()
        self.storage = PresetStorage(self.settings.preset.output_dir)

    def convert_sse_data(
        self,
        rawData: str,
        baseTimestamp: str | None = None,
        format: ConvertFormat = ConvertFormat.SINGLE,
    ) -> str:
        if not rawData:
            raise ToolError("Conversion failed: missing required parameter rawData")

        try:
            records = convert_by_format(
                rawData,
                format,
                baseTimestamp,
                strategy=self.settings.timestamp_strategy,
                increment_range=self.settings.increment_range,
            )
        except ConverterError as e:
            raise ToolError(f"Conversion failed: {e}") from e

        logger.info(f"convert_sse_data: {len(records)} events")
        return (
            f"Conversion succeeded! Generated {len(records)} events.\n\n"
            f"Result:\n{render_records(records)}"
        )

    def convert_sse_object(
        self,
        sseObject: dict[str, Any],
        timestamp: str | None = None,
    ) -> str:
        if sseObject is None:
            raise ToolError("Object conversion failed: missing required parameter sseObject")

        record = convert_from_object(sseObject, timestamp)
        return f"Object conversion succeeded!\n\nResult:\n{render_json(record)}"

    def generate_preset_data(
        self,
        sseDataArray: list[dict[str, Any]],
        filename: str | None = None,
        save: bool = False,
    ) -> str:
        filename = filename or self.settings.preset.default_filename
        if not save:
            preset = self.storage.build_preset(sseDataArray, filename)
            return (
                f"Preset data generated! File name: {preset.filename}\n\n"
                f"Content:\n{preset.content}\n\n"
                f"Save this content to {self.settings.preset.output_dir}/{preset.filename}."
            )

        try:
            path = self.storage.save_preset(sseDataArray, filename)
        except OSError as e:
            raise ToolError(f"Preset save failed: {e}") from e
        return f"Preset data saved! {len(sseDataArray)} items written to {path}."


def create_server(settings: ConverterConfig | None = None) -> FastMCP:
    """Build the MCP server with the converter tools registered."""
    tools = ConverterTools(settings)
    server = FastMCP(SERVER_NAME)

    server.tool(
        name="convert_sse_data",
        description=(
            "Convert a raw SSE stream into preset records, e.g. "
            '"event:message\\ndata:{\\"sseId\\":\\"123\\"}\\n\\n". '
            "format: single (one stream), multiple (several events), object (JSON object)."
        ),
    )(tools.convert_sse_data)
    server.tool(
        name="convert_sse_object",
        description="Convert an SSE event object (event, data, sseId, ...) into a preset record.",
    )(tools.convert_sse_object)
    server.tool(
        name="generate_preset_data",
        description=(
            "Render preset data file content from converted records. "
            "Set save to write the file into the configured preset directory."
        ),
    )(tools.generate_preset_data)

    return server

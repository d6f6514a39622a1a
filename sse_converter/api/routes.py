"""
Conversion HTTP API

Routes mirror the MCP tools so workflow engines (n8n and similar) can
call the converter over plain HTTP.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from sse_converter import __version__
from sse_converter.errors import ConverterError, InputMissingError
from sse_converter.models.config import ConverterConfig
from sse_converter.models.record import ConvertFormat
from sse_converter.normalizers import convert_batch, convert_by_format, convert_from_object
from sse_converter.storage import PresetStorage


logger = logging.getLogger(__name__)

router = APIRouter(tags=["SSE Conversion"])

SERVICE_NAME = "sse-converter"

# Placeholder n8n sends when an expression was pasted as plain text
N8N_UNRESOLVED_TEMPLATE = "{{ $json.sseData }}"

TOOL_DESCRIPTORS: list[dict[str, Any]] = [
    {
        "name": "convert_sse_data",
        "description": "Convert a raw SSE stream into preset records",
        "endpoint": "/api/convert/sse-data",
        "method": "POST",
        "parameters": {
            "rawData": {"type": "string", "required": True, "description": "Raw SSE text"},
            "baseTimestamp": {"type": "string", "required": False, "description": "Fallback timestamp"},
            "format": {
                "type": "string",
                "required": False,
                "enum": [f.value for f in ConvertFormat],
                "description": "Input format",
            },
        },
    },
    {
        "name": "convert_sse_object",
        "description": "Convert an SSE event object into a preset record",
        "endpoint": "/api/convert/sse-object",
        "method": "POST",
        "parameters": {
            "sseObject": {"type": "object", "required": True, "description": "SSE event object"},
            "timestamp": {"type": "string", "required": False, "description": "Fallback timestamp"},
        },
    },
    {
        "name": "generate_preset_data",
        "description": "Render preset data file content",
        "endpoint": "/api/generate/preset-data",
        "method": "POST",
        "parameters": {
            "sseDataArray": {"type": "array", "required": True, "description": "Converted records"},
            "filename": {"type": "string", "required": False, "description": "File name"},
            "save": {"type": "boolean", "required": False, "description": "Write into the preset directory"},
        },
    },
    {
        "name": "convert_batch",
        "description": "Convert a mixed list of SSE strings and event objects",
        "endpoint": "/api/convert/batch",
        "method": "POST",
        "parameters": {
            "items": {"type": "array", "required": True, "description": "SSE strings or objects"},
            "baseTimestamp": {"type": "string", "required": False, "description": "Fallback timestamp"},
            "format": {
                "type": "string",
                "required": False,
                "enum": [f.value for f in ConvertFormat],
                "description": "Format applied to string items",
            },
        },
    },
]

AVAILABLE_ENDPOINTS = ["GET /health", "GET /api/tools"] + [
    f"{tool['method']} {tool['endpoint']}" for tool in TOOL_DESCRIPTORS
]


class ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ConvertSseDataRequest(ApiModel):
    raw_data: Any = Field(default=None, alias="rawData")
    base_timestamp: Any = Field(default=None, alias="baseTimestamp")
    format: ConvertFormat = Field(default=ConvertFormat.SINGLE)


class ConvertSseObjectRequest(ApiModel):
    sse_object: dict[str, Any] | None = Field(default=None, alias="sseObject")
    timestamp: Any = Field(default=None)


class GeneratePresetRequest(ApiModel):
    sse_data_array: Any = Field(default=None, alias="sseDataArray")
    filename: str | None = Field(default=None)
    save: bool = Field(default=False)


class ConvertBatchRequest(ApiModel):
    items: Any = Field(default=None)
    base_timestamp: Any = Field(default=None, alias="baseTimestamp")
    format: ConvertFormat = Field(default=ConvertFormat.SINGLE)


def get_settings(request: Request) -> ConverterConfig:
    return request.app.state.settings


def error_response(message: str, status_code: int = 400, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, **extra},
    )


def unwrap_raw_data(raw_data: Any) -> str:
    """Extract SSE text from the shapes n8n HTTP nodes send.

    Accepts a plain string, ``[{"sseData": ...}]`` or ``{"sseData": ...}``;
    any other value is stringified.

    Raises:
        InputMissingError: If nothing usable was sent
    """
    if isinstance(raw_data, list) and raw_data and isinstance(raw_data[0], dict) and raw_data[0].get("sseData"):
        logger.debug("Detected n8n array payload, using sseData")
        raw_data = raw_data[0]["sseData"]
    elif isinstance(raw_data, dict) and raw_data.get("sseData"):
        logger.debug("Detected n8n object payload, using sseData")
        raw_data = raw_data["sseData"]

    if not raw_data:
        raise InputMissingError("Missing required parameter: rawData")
    if isinstance(raw_data, str):
        return raw_data
    return str(raw_data)


@router.get("/health")
async def health() -> Any:
    return {"status": "ok", "service": SERVICE_NAME, "version": __version__}


@router.get("/api/tools")
async def list_tools() -> Any:
    """
    List available conversion tools

    Each entry names the tool, its endpoint and HTTP method, and the
    request body parameters it accepts.
    """
    return {"tools": TOOL_DESCRIPTORS}


@router.post("/api/convert/sse-data")
async def convert_sse_data(
    body: ConvertSseDataRequest,
    settings: ConverterConfig = Depends(get_settings),
) -> Any:
    """
    Convert raw SSE data

    **Request body**
    - rawData: SSE text (or an n8n ``sseData`` wrapper)
    - baseTimestamp: fallback timestamp, optional
    - format: single | multiple | object (default single)
    """
    if isinstance(body.raw_data, str) and N8N_UNRESOLVED_TEMPLATE in body.raw_data:
        return error_response(
            "n8n template variable was not resolved. Use expression syntax in the "
            'HTTP node JSON body, e.g. ={"rawData": $json.sseData, "format": "single"}',
            rawDataReceived=body.raw_data,
        )

    try:
        raw = unwrap_raw_data(body.raw_data)
        logger.info(f"Converting SSE data: {len(raw)} chars, format={body.format.value}")
        records = convert_by_format(
            raw,
            body.format,
            body.base_timestamp,
            strategy=settings.timestamp_strategy,
            increment_range=settings.increment_range,
        )
    except ConverterError as e:
        return error_response(str(e))

    return {
        "success": True,
        "data": [record.model_dump() for record in records],
        "count": len(records),
        "format": body.format.value,
        "message": f"Successfully converted {len(records)} SSE events",
    }


@router.post("/api/convert/sse-object")
async def convert_sse_object(body: ConvertSseObjectRequest) -> Any:
    """
    Convert an SSE event object

    **Request body**
    - sseObject: object with optional event, data, timestamp and any other fields
    - timestamp: fallback timestamp, optional
    """
    if body.sse_object is None:
        return error_response("Missing required parameter: sseObject")

    record = convert_from_object(body.sse_object, body.timestamp)
    return {
        "success": True,
        "data": record.model_dump(),
        "message": "Successfully converted SSE object",
    }


@router.post("/api/generate/preset-data")
async def generate_preset_data(
    body: GeneratePresetRequest,
    settings: ConverterConfig = Depends(get_settings),
) -> Any:
    """
    Render preset data file content

    **Request body**
    - sseDataArray: converted records
    - filename: target file name, optional
    - save: also write the file into the preset directory, optional
    """
    if not isinstance(body.sse_data_array, list):
        return error_response("Missing required parameter: sseDataArray (must be an array)")

    storage = PresetStorage(settings.preset.output_dir)
    filename = body.filename or settings.preset.default_filename
    preset = storage.build_preset(body.sse_data_array, filename)
    data: dict[str, Any] = {
        "filename": preset.filename,
        "content": preset.content,
        "itemCount": preset.item_count,
    }

    if body.save:
        try:
            data["path"] = str(storage.save_preset(body.sse_data_array, filename))
        except OSError as e:
            logger.error(f"Failed to save preset {preset.filename}: {e}")
            return error_response(f"Failed to save preset file: {e}", status_code=500)

    return {
        "success": True,
        "data": data,
        "message": f"Successfully generated preset data file with {preset.item_count} items",
    }


@router.post("/api/convert/batch")
async def convert_batch_items(
    body: ConvertBatchRequest,
    settings: ConverterConfig = Depends(get_settings),
) -> Any:
    """
    Batch conversion

    Strings are converted with ``format``, objects with the object
    converter. Failed items are reported in ``errors`` with their index;
    ``success`` is true only when every item converted.
    """
    if not isinstance(body.items, list):
        return error_response("Missing required parameter: items (must be an array)")

    result = convert_batch(
        body.items,
        body.base_timestamp,
        body.format,
        strategy=settings.timestamp_strategy,
        increment_range=settings.increment_range,
    )

    content: dict[str, Any] = {
        "success": result.success,
        "data": [record.model_dump() for record in result.data],
        "totalItems": result.total_items,
        "successCount": result.success_count,
        "errorCount": result.error_count,
        "recordCount": result.record_count,
        "message": (
            f"Processed {result.total_items} items, {result.success_count} successful, "
            f"{result.record_count} records"
        ),
    }
    if result.errors:
        content["errors"] = [error.model_dump() for error in result.errors]
    return content

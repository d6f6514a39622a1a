"""Format dispatch and batch conversion shared by the adapters."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

import orjson

from sse_converter.errors import InvalidJsonError
from sse_converter.models.record import (
    BatchItemError,
    BatchResult,
    ConvertFormat,
    NormalizedRecord,
)

from .sse import convert_from_object, convert_multiple_sse_events, convert_sse_data


logger = logging.getLogger(__name__)


def parse_object(raw: str) -> dict[str, Any]:
    """Parse a JSON object from text.

    Raises:
        InvalidJsonError: If the text is not JSON or not a JSON object
    """
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise InvalidJsonError(f"Invalid JSON object: {e}", raw[:200]) from e

    if not isinstance(parsed, dict):
        raise InvalidJsonError(
            f"Expected a JSON object, got {type(parsed).__name__}", raw[:200]
        )
    return parsed


def convert_by_format(
    raw: str,
    format: ConvertFormat | str = ConvertFormat.SINGLE,
    base_timestamp: Any = None,
    **kwargs: Any,
) -> list[NormalizedRecord]:
    """Convert text according to its declared format.

    ``single`` and ``multiple`` run the stream parser; ``object`` parses
    the text as one JSON event object.

    Args:
        raw: Input text
        format: Declared input format
        base_timestamp: Fallback timestamp
        **kwargs: Stream parser options (strategy, clock, rng, increment_range)

    Returns:
        Converted records

    Raises:
        InvalidJsonError: For ``object`` input that is not a JSON object
    """
    format = ConvertFormat(format)

    if format is ConvertFormat.OBJECT:
        clock = kwargs.get("clock")
        return [convert_from_object(parse_object(raw), base_timestamp, clock=clock)]
    if format is ConvertFormat.MULTIPLE:
        return convert_multiple_sse_events(raw, base_timestamp, **kwargs)
    return convert_sse_data(raw, base_timestamp, **kwargs)


def convert_batch(
    items: Iterable[Any],
    base_timestamp: Any = None,
    format: ConvertFormat | str = ConvertFormat.SINGLE,
    **kwargs: Any,
) -> BatchResult:
    """Convert a mixed list of SSE strings and event objects.

    Strings are converted with ``format``; mappings go through the object
    converter. A failing item is recorded with its index and the rest of
    the batch still runs.
    """
    items = list(items)
    records: list[NormalizedRecord] = []
    errors: list[BatchItemError] = []
    success_count = 0

    for index, item in enumerate(items):
        try:
            if isinstance(item, str):
                converted = convert_by_format(item, format, base_timestamp, **kwargs)
            elif isinstance(item, Mapping):
                converted = [convert_from_object(item, base_timestamp, clock=kwargs.get("clock"))]
            else:
                raise TypeError("Item must be a string or object")
        except (InvalidJsonError, TypeError, ValueError) as e:
            logger.warning(f"Batch item {index} failed: {e}")
            errors.append(BatchItemError(index=index, item=item, error=str(e)))
            continue

        records.extend(converted)
        success_count += 1

    logger.info(
        f"Batch processed: {len(items)} items, {success_count} ok, "
        f"{len(errors)} failed, {len(records)} records"
    )

    return BatchResult(
        data=records,
        total_items=len(items),
        success_count=success_count,
        error_count=len(errors),
        record_count=len(records),
        errors=errors,
    )

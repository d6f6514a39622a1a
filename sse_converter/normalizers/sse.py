"""SSE stream and event-object normalization to replay records.

Every record value is rendered by ``format_sse_value`` so the stream
parser and the object converter produce byte-identical blocks:

    event:<name>
    data:<payload>
    <blank line>
"""

import logging
import random
import time
from collections.abc import Callable, Mapping
from typing import Any

import orjson

from sse_converter.models.record import NormalizedRecord, TimestampStrategy
from sse_converter.serialization import dumps


logger = logging.getLogger(__name__)

Clock = Callable[[], int]

EVENT_PREFIX = "event:"
DATA_PREFIX = "data:"
DEFAULT_EVENT_TYPE = "message"

# Keys consumed by convert_from_object; everything else goes into the payload
OBJECT_RESERVED_KEYS = frozenset({"event", "data", "timestamp"})

# Synthetic spacing between consecutive events, [min, max) milliseconds
DEFAULT_INCREMENT_RANGE = (100, 1100)


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def _is_set(value: Any) -> bool:
    """Truthiness as JSON producers see it (empty objects and arrays are set)."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        # NaN is unset too
        return value == value and value != 0
    return True


def _dumps(value: Any) -> str:
    return dumps(value).decode()


def stringify(value: Any) -> str:
    """Render a scalar the way it appears in JSON text.

    Strings pass through untouched, booleans become ``true``/``false``,
    integral floats drop their fractional part and containers are
    compact JSON.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return _dumps(value)


def _fallback_timestamp(fallback: Any, clock: Clock) -> str:
    if _is_set(fallback):
        return stringify(fallback)
    return str(clock())


def extract_timestamp(
    data: str | None,
    fallback: Any = None,
    clock: Clock | None = None,
) -> str:
    """Derive an event timestamp from its data payload.

    Args:
        data: Raw ``data:`` payload, possibly JSON
        fallback: Timestamp used when the payload carries none
        clock: Millisecond clock used when there is no fallback either

    Returns:
        Timestamp as a string
    """
    if data:
        try:
            parsed = orjson.loads(data)
        except orjson.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict) and _is_set(parsed.get("timestamp")):
            return stringify(parsed["timestamp"])

    return _fallback_timestamp(fallback, clock or now_ms)


def format_sse_value(event: str, data: str | None = None) -> str:
    """Format one event as a canonical SSE block.

    The ``data:`` line is omitted when there is no payload. The block
    always ends with a single blank line.
    """
    value = f"{EVENT_PREFIX}{event}\n"
    if data:
        value += f"{DATA_PREFIX}{data}\n"
    return value + "\n"


def _synthetic_seed(base_timestamp: Any, clock: Clock) -> int:
    """Starting point for synthetic timestamps."""
    if _is_set(base_timestamp) and not isinstance(base_timestamp, bool):
        try:
            if isinstance(base_timestamp, (int, float)):
                return int(base_timestamp)
            return int(str(base_timestamp).strip())
        except ValueError:
            logger.warning(f"Base timestamp {base_timestamp!r} is not numeric, seeding from clock")
    return clock()


def convert_sse_data(
    raw: str,
    base_timestamp: Any = None,
    *,
    strategy: TimestampStrategy | str = TimestampStrategy.PAYLOAD,
    clock: Clock | None = None,
    rng: random.Random | None = None,
    increment_range: tuple[int, int] = DEFAULT_INCREMENT_RANGE,
) -> list[NormalizedRecord]:
    """Parse an SSE text stream into normalized records.

    Lines are scanned in order. ``event:`` starts a new event (flushing a
    pending one), ``data:`` sets the payload with the last line winning,
    a blank line flushes the pending event and anything else is ignored.
    A pending event left at the end of input is flushed once. Malformed
    input never raises; it just yields fewer records.

    Args:
        raw: SSE text using ``\\n`` line breaks
        base_timestamp: Fallback timestamp (payload strategy) or seed
            (synthetic strategy)
        strategy: How each record's timestamp is derived
        clock: Millisecond clock, defaults to wall-clock time
        rng: Random source for synthetic increments
        increment_range: Synthetic increment bounds, [min, max) milliseconds

    Returns:
        Records in input order
    """
    strategy = TimestampStrategy(strategy)
    clock = clock or now_ms
    records: list[NormalizedRecord] = []

    synthetic = strategy is TimestampStrategy.SYNTHETIC
    running = _synthetic_seed(base_timestamp, clock) if synthetic else 0
    rng = rng or random.Random()
    low, high = increment_range

    def flush(event: str, data: str | None) -> None:
        nonlocal running
        if synthetic:
            timestamp = str(running)
            running += rng.randrange(low, high)
        else:
            timestamp = extract_timestamp(data, base_timestamp, clock)

        records.append(
            NormalizedRecord(timestamp=timestamp, value=format_sse_value(event, data))
        )

    current_event: str | None = None
    current_data: str | None = None
    ignored = 0

    for line in raw.strip().split("\n"):
        if line.startswith(EVENT_PREFIX):
            if current_event is not None:
                flush(current_event, current_data)
            current_event = line[len(EVENT_PREFIX):]
            current_data = None
        elif line.startswith(DATA_PREFIX):
            # TODO: concatenate repeated data lines once replay consumers accept multi-line payloads
            current_data = line[len(DATA_PREFIX):]
        elif not line.strip():
            if current_event is not None:
                flush(current_event, current_data)
                current_event = None
                current_data = None
        else:
            ignored += 1

    if current_event is not None:
        flush(current_event, current_data)

    logger.debug(f"Parsed {len(records)} events ({ignored} lines ignored, strategy={strategy.value})")
    return records


def convert_multiple_sse_events(
    raw: str,
    base_timestamp: Any = None,
    **kwargs: Any,
) -> list[NormalizedRecord]:
    """Convert a stream holding several events.

    The stream parser already handles any number of events, so this is
    the same operation under the ``multiple`` format name.
    """
    return convert_sse_data(raw, base_timestamp, **kwargs)


def convert_from_object(
    source: Mapping[str, Any],
    fallback_timestamp: Any = None,
    *,
    clock: Clock | None = None,
) -> NormalizedRecord:
    """Convert a loose event object into a single record.

    ``event`` names the event (default ``message``). A set ``data`` field
    becomes the payload, JSON-encoded unless already a string. Without
    ``data`` the payload is every other field except ``event`` and
    ``timestamp``, in their original order. The object's own
    ``timestamp`` wins over the fallback, which wins over the clock.
    """
    event = source.get("event")
    data = source.get("data")
    timestamp = source.get("timestamp")

    if _is_set(data):
        payload = data if isinstance(data, str) else _dumps(data)
    else:
        payload = _dumps({k: v for k, v in source.items() if k not in OBJECT_RESERVED_KEYS})

    event_type = stringify(event) if _is_set(event) else DEFAULT_EVENT_TYPE

    if _is_set(timestamp):
        final_timestamp = stringify(timestamp)
    else:
        final_timestamp = _fallback_timestamp(fallback_timestamp, clock or now_ms)

    return NormalizedRecord(
        timestamp=final_timestamp,
        value=format_sse_value(event_type, payload),
    )

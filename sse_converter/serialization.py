"""orjson encoding that accepts any integer JSON can carry."""

from collections.abc import Mapping
from typing import Any

import orjson


# orjson encodes integers in [i64 min, u64 max] natively
_NATIVE_INT_MIN = -(2**63)
_NATIVE_INT_MAX = 2**64 - 1


def _widen_ints(value: Any) -> Any:
    """Replace integers orjson cannot encode with pre-rendered number text."""
    if isinstance(value, int) and not isinstance(value, bool):
        if _NATIVE_INT_MIN <= value <= _NATIVE_INT_MAX:
            return value
        return orjson.Fragment(str(value).encode())
    if isinstance(value, Mapping):
        return {k: _widen_ints(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_widen_ints(v) for v in value]
    return value


def dumps(value: Any, option: int = 0) -> bytes:
    """Serialize with orjson, falling back to a widened copy for big integers."""
    option |= orjson.OPT_NON_STR_KEYS
    try:
        return orjson.dumps(value, option=option)
    except orjson.JSONEncodeError:
        return orjson.dumps(_widen_ints(value), option=option)

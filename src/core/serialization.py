"""JSON encoding for calculation and extraction results.

Results carry Decimal amounts. They are written as JSON numbers straight from
their decimal text so cents never pass through a float.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import orjson
from pydantic import BaseModel


def _default(obj: Any) -> Any:
    """orjson fallback for types it does not encode natively."""
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise TypeError(f"Cannot encode non-finite Decimal: {obj}")
        return orjson.Fragment(format(obj, "f").encode("utf-8"))
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="python", by_alias=False)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def dumps(obj: Any, *, indent: bool = False) -> bytes:
    """Encode a result (dataclass, pydantic model, list, dict) as JSON bytes.

    Args:
        obj: Object to encode.
        indent: Pretty-print with two-space indentation.

    Returns:
        UTF-8 encoded JSON.
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, default=_default, option=option)


def to_jsonable(obj: Any) -> Any:
    """Round-trip through JSON to get plain dicts, lists, and numbers."""
    return orjson.loads(dumps(obj))

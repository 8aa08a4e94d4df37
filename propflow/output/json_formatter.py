"""JSON output formatter."""

import json
from enum import Enum
from typing import Any


def _default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def to_json(data: Any) -> str:
    """Serialize output data; enums become their values."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=_default)


def print_json(data: Any):
    """Print data as formatted JSON to stdout."""
    print(to_json(data))

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path


def to_jsonable(obj):
    """Convert records and log fields to JSON-serializable values.

    Handles:
    - Basic types (str, int, float, bool, None)
    - Enums (their value) and paths (their string form)
    - Collections (list, tuple, set, dict)
    - Dataclasses and pydantic models
    """
    if isinstance(obj, Enum):
        return to_jsonable(obj.value)
    elif obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, (list, tuple)):
        return [to_jsonable(item) for item in obj]
    elif isinstance(obj, (set, frozenset)):
        return sorted(to_jsonable(item) for item in obj)
    elif isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    elif hasattr(obj, 'model_dump'):
        return to_jsonable(obj.model_dump())
    elif is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    else:
        return str(obj)

import json
import pathlib
from datetime import datetime, date
from enum import Enum


def to_json(obj):
    """Convert un-serialisable objects to JSON-native types."""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, pathlib.PurePath):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Type {type(obj)} not serialisable")


def dumps(data, **kw):
    """json.dumps wrapper that handles paths / enums / datetime."""
    return json.dumps(data, default=to_json, **kw)

"""Serialization utilities."""

import json
from dataclasses import asdict
from datetime import datetime
from typing import Any


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings."""
    data = asdict(obj)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = value.isoformat()
    return data


def to_camel(name: str) -> str:
    """snake_case -> camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def camelize_keys(data: Any) -> Any:
    """Recursively convert dict keys to camelCase."""
    if isinstance(data, dict):
        return {to_camel(key): camelize_keys(value) for key, value in data.items()}
    if isinstance(data, list):
        return [camelize_keys(item) for item in data]
    return data


def to_json_line(record: dict) -> str:
    return json.dumps(record, default=str, ensure_ascii=False) + "\n"

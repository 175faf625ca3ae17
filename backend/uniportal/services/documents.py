"""Helpers for turning raw BSON documents into JSON-friendly dicts."""
from __future__ import annotations

from typing import Any

from bson import ObjectId


def normalize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: normalize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize_value(v) for v in value]
    return value


def normalize_document(doc: dict[str, Any]) -> dict[str, Any]:
    """Convert every ObjectId in a document to its hex string."""
    return normalize_value(doc)


def nonblank_sorted(values: list[Any]) -> list[str]:
    """Drop missing/blank entries from a distinct() result and sort the rest."""
    return sorted(v for v in values if isinstance(v, str) and v.strip())

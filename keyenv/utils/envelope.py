"""Helpers for unwrapping KeyEnv JSON response envelopes.

The API has answered in several shapes over time: ``{"data": ...}``, a
resource-named wrapper such as ``{"secret": {...}}`` or ``{"secrets": [...]}``,
or the bare object/list. These helpers accept all of them.
"""
from __future__ import annotations

from typing import Any, Dict, List


def unwrap(payload: Any, *fields: str) -> Any:
    """Return the value of the first of *fields* present in *payload*, else *payload* itself."""
    if isinstance(payload, dict):
        for field in fields:
            if field in payload:
                return payload[field]
    return payload


def unwrap_object(payload: Any, *fields: str) -> Dict[str, Any]:
    """Unwrap a single-object response. Only a nested object counts as a match."""
    if isinstance(payload, dict):
        for field in fields:
            nested = payload.get(field)
            if isinstance(nested, dict):
                return nested
        return payload
    return {}


def unwrap_list(payload: Any, *fields: str) -> List[Any]:
    """Unwrap a list response; a missing or null payload is an empty list."""
    value = unwrap(payload, *fields)
    if isinstance(value, list):
        return value
    return []

"""
Optional-field lookups for untrusted provider payloads.

Provider documents change shape between endpoints and API versions, so fields
are read through an explicit fallthrough of dotted paths instead of indexing.
"""

import math
from typing import Any


def dig(payload: Any, path: str) -> Any:
    """Follow a dotted path through dicts and list indexes. None when any hop is missing."""
    current = payload
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def pluck(payload: Any, *paths: str) -> Any:
    """First non-None value among *paths*, tried in order."""
    for path in paths:
        value = dig(payload, path)
        if value is not None:
            return value
    return None


def as_number(value: Any) -> float:
    """Coerce numbers and numeric strings ("1,200") to float; anything else is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        try:
            parsed = float(value.replace(",", ""))
        except ValueError:
            return 0.0
        return parsed if math.isfinite(parsed) else 0.0
    return 0.0


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []

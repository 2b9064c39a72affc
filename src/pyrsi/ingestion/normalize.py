"""Normalization helpers.

Centralizes defensive parsing of provider payload values.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool) or value == "" or value == "--":
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def strict_number(value: Any) -> float | None:
    """Return *value* as a float only if it already is a real number.

    Coordinates must arrive as numbers; numeric strings are treated as
    malformed rather than coerced.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def epoch_seconds(value: Any) -> int | None:
    """Extract epoch seconds from a provider timestamp.

    Accepts a ``{"seconds": ..., "nanoseconds": ...}`` mapping (the persistence
    layer's timestamp shape), an object exposing ``.seconds``, a ``datetime``
    or a plain number.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        return safe_int(value.get("seconds"))
    seconds = getattr(value, "seconds", None)
    if seconds is not None:
        return safe_int(seconds)
    timestamp = getattr(value, "timestamp", None)
    if callable(timestamp):
        return int(timestamp())
    return safe_int(value)


def strip_after_underscore(value: str) -> str:
    """Drop everything from the first ``_`` onward."""
    head, _sep, _tail = value.partition("_")
    return head

"""Road-surface classification labels."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class Label(StrEnum):
    UNDEFINED = "Undefined"
    BARE = "Bare"
    FULL = "Full"
    PARTLY = "Partly"


_BY_NUMBER: dict[int, Label] = {
    1: Label.BARE,
    2: Label.PARTLY,
    3: Label.FULL,
    4: Label.UNDEFINED,
}


def class_by_number(value: Any) -> Label | None:
    """Translate a predicted class code to its label.

    ``1`` Bare, ``2`` Partly, ``3`` Full, ``4`` Undefined. Anything else,
    including ``None``, ``0`` and non-integral numbers, is unresolved and
    yields ``None``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return _BY_NUMBER.get(int(value))


def highest_number_string(undefined: float, bare: float, full: float, partly: float) -> Label:
    """Return the label with the highest probability.

    Ties resolve in the order Undefined, Bare, Full, Partly: the first
    candidate reaching the maximum wins.
    """
    candidates = (
        (Label.UNDEFINED, undefined),
        (Label.BARE, bare),
        (Label.FULL, full),
        (Label.PARTLY, partly),
    )
    highest = max(value for _label, value in candidates)
    for label, value in candidates:
        if value == highest:
            return label
    return Label.UNDEFINED

"""Base model for provider payloads.

Every sensor payload model inherits from :class:`RsiBaseModel` which
provides:

* A ``model_validator(mode="before")`` that strips provider sentinel
  values (``""``, ``"--"``, NaN) so the field default is used.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

# Sentinel strings providers use for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


class RsiBaseModel(BaseModel):
    """Base for provider payload models.

    Sentinel values (``""``, ``"--"``, NaN) are dropped so the field
    default is used instead.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values before field validation."""
        if not isinstance(values, dict):
            return values
        return RsiBaseModel._clean_dict(values)

"""Well-known store keys.

The store accepts any string key; these are the ones the fusion pipeline and
its map/UI collaborators agree on.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class StateKey(StrEnum):
    CURRENT_GEOJSON = "currentGeoJSON"
    CURRENT_INTERPOLATION = "currentInterpolation"
    STUDY_AREA_STATE = "studyAreaState"
    REALTIME_STATE = "realtimeState"
    CLICKED_POINT_VALUES = "clickedPointValues"
    TIME_RANGE = "timeRange"
    MAP = "map"
    CHART = "chart"
    IMAGE_ASPECT_RATIO = "imageAspectRatio"


def default_state() -> dict[str, Any]:
    """Initial values a fresh application store starts with."""
    return {
        StateKey.CURRENT_GEOJSON.value: None,
        StateKey.STUDY_AREA_STATE.value: True,
        StateKey.CLICKED_POINT_VALUES.value: {"CAM": False},
        StateKey.MAP.value: None,
    }

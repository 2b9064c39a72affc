"""Fused GeoJSON-shaped feature models."""

from __future__ import annotations

import dataclasses
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyrsi.classification import Label
from pyrsi.models.records import SensorType


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class AngleRecord(_FrozenModel):
    """Latest image of one camera direction of an RWIS station."""

    angle: str
    timestamp: int
    url: str | None = None
    classes: dict[str, float | None] = Field(default_factory=dict, alias="class")
    classification: Label | None = None
    gradcam: str | None = None


class PointGeometry(_FrozenModel):
    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]
    """``(longitude, latitude)``"""


class FeatureProperties(_FrozenModel):
    id: str
    type: SensorType
    specific_id: str = Field(alias="specificID")
    timestamp: int | None = None
    classification: Label | None = None
    image: str | None = None
    classes: dict[str, float | None] | None = None
    angles: dict[str, AngleRecord] | None = None
    recent_angle: str | None = Field(default=None, alias="recentAngle")


class Feature(_FrozenModel):
    type: Literal["Feature"] = "Feature"
    geometry: PointGeometry
    properties: FeatureProperties


class FeatureCollection(_FrozenModel):
    """Result of one fusion pass.

    Each pass builds a new collection; consumers must not mutate it.
    """

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)

    def to_geojson(self) -> dict[str, Any]:
        """Plain GeoJSON dict using the wire property names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclasses.dataclass
class StationAggregate:
    """Per-station accumulator used during a single fusion pass."""

    id: str
    lat: float
    lng: float
    angles: dict[str, AngleRecord] = dataclasses.field(default_factory=dict)
    most_recent_timestamp: int = 0

    def offer(self, record: AngleRecord) -> bool:
        """Keep *record* if it is newer than the stored angle; return whether it was kept."""
        current = self.angles.get(record.angle)
        if current is not None and current.timestamp >= record.timestamp:
            return False
        self.angles[record.angle] = record
        if record.timestamp > self.most_recent_timestamp:
            self.most_recent_timestamp = record.timestamp
        return True

    def most_recent_angle(self) -> AngleRecord | None:
        for record in self.angles.values():
            if record.timestamp == self.most_recent_timestamp:
                return record
        return None

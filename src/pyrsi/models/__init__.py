"""Typed models for sensor records and fused features."""

from pyrsi.models.dashcam import DashcamImage, DashcamListing
from pyrsi.models.features import (
    AngleRecord,
    Feature,
    FeatureCollection,
    FeatureProperties,
    PointGeometry,
    StationAggregate,
)
from pyrsi.models.records import (
    AvlPayload,
    GeoPoint,
    RawPointRecord,
    RwisPayload,
    SensorPayload,
    SensorType,
    coerce_record,
    parse_avl,
    parse_rwis,
)

__all__ = [
    "AngleRecord",
    "AvlPayload",
    "DashcamImage",
    "DashcamListing",
    "Feature",
    "FeatureCollection",
    "FeatureProperties",
    "GeoPoint",
    "PointGeometry",
    "RawPointRecord",
    "RwisPayload",
    "SensorPayload",
    "SensorType",
    "StationAggregate",
    "coerce_record",
    "parse_avl",
    "parse_rwis",
]

"""Fusion of AVL points and RWIS station images into one feature collection.

A fusion pass is pure: it reads raw records and builds a brand-new
:class:`~pyrsi.models.features.FeatureCollection`. Malformed records are
input defects and are skipped with a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pyrsi._constants import STATION_KEY_WIDTH
from pyrsi.classification import Label, class_by_number, highest_number_string
from pyrsi.exceptions import RsiValidationError
from pyrsi.ingestion.normalize import strip_after_underscore
from pyrsi.models.features import (
    AngleRecord,
    Feature,
    FeatureCollection,
    FeatureProperties,
    PointGeometry,
    StationAggregate,
)
from pyrsi.models.records import AvlPayload, RwisPayload, SensorType, parse_avl, parse_rwis

_logger = logging.getLogger(__name__)


def station_key(record_id: str) -> str:
    """Group key of an RWIS record id (``IDOT-047-02_...`` → ``IDOT-047``)."""
    return strip_after_underscore(record_id)[:STATION_KEY_WIDTH]


def angle_key(record_id: str) -> str | None:
    """Camera direction of an RWIS record id (``IDOT-047-02_...`` → ``02``)."""
    segments = strip_after_underscore(record_id).split("-")
    if len(segments) < 3 or not segments[2]:
        return None
    return segments[2]


def _avl_feature(record_id: str, payload: AvlPayload) -> Feature:
    assert payload.position is not None  # noqa: S101
    classification = highest_number_string(
        payload.undefined or 0,
        payload.bare or 0,
        payload.full or 0,
        payload.partly or 0,
    )
    return Feature(
        geometry=PointGeometry(coordinates=(payload.position.longitude, payload.position.latitude)),
        properties=FeatureProperties(
            id=record_id,
            type=SensorType.AVL,
            specific_id=strip_after_underscore(record_id),
            timestamp=payload.timestamp,
            classification=classification,
            image=payload.image_url,
            classes={
                Label.UNDEFINED.value: payload.undefined,
                Label.BARE.value: payload.bare,
                Label.FULL.value: payload.full,
                Label.PARTLY.value: payload.partly,
            },
        ),
    )


def _angle_record(angle: str, timestamp: int, payload: RwisPayload) -> AngleRecord:
    return AngleRecord(
        angle=angle,
        timestamp=timestamp,
        url=payload.image,
        classes={
            Label.UNDEFINED.value: payload.class_4,
            Label.BARE.value: payload.class_1,
            Label.PARTLY.value: payload.class_2,
            Label.FULL.value: payload.class_3,
        },
        classification=class_by_number(payload.predicted_class),
        gradcam=payload.gradcam,
    )


def _station_feature(station: StationAggregate) -> Feature | None:
    recent = station.most_recent_angle()
    if recent is None:
        _logger.warning("Could not determine most recent angle for RWIS station %s", station.id)
        return None
    return Feature(
        geometry=PointGeometry(coordinates=(station.lng, station.lat)),
        properties=FeatureProperties(
            id=station.id,
            type=SensorType.RWIS,
            specific_id=station.id,
            timestamp=station.most_recent_timestamp,
            classification=recent.classification,
            image=recent.url,
            angles=dict(station.angles),
            recent_angle=recent.angle,
        ),
    )


def _aggregate_stations(records: Iterable[Any]) -> dict[str, StationAggregate]:
    stations: dict[str, StationAggregate] = {}
    for record in records:
        try:
            record_id, payload = parse_rwis(record)
        except RsiValidationError as exc:
            _logger.warning("Skipping invalid RWIS point %s: %s", exc.record_id or "<no id>", exc)
            continue
        assert payload.coordinates is not None  # noqa: S101

        key = station_key(record_id)
        station = stations.get(key)
        if station is None:
            station = StationAggregate(
                id=key,
                lat=payload.coordinates.latitude,
                lng=payload.coordinates.longitude,
            )
            stations[key] = station

        angle = angle_key(record_id)
        if not payload.timestamp or angle is None:
            continue
        station.offer(_angle_record(angle, payload.timestamp, payload))
    return stations


def fuse(avl_records: Iterable[Any] | None, rwis_records: Iterable[Any] | None) -> FeatureCollection:
    """Merge AVL and RWIS records into a single feature collection.

    One feature is emitted per valid AVL point, followed by one feature per
    RWIS station. A station's top-level classification, image and
    ``recent_angle`` come from its most recently captured angle.
    """
    features: list[Feature] = []

    avl_count = 0
    for record in avl_records or ():
        avl_count += 1
        try:
            record_id, payload = parse_avl(record)
        except RsiValidationError as exc:
            _logger.warning("Skipping invalid AVL point %s: %s", exc.record_id or "<no id>", exc)
            continue
        features.append(_avl_feature(record_id, payload))

    stations = _aggregate_stations(rwis_records or ())
    for station in stations.values():
        feature = _station_feature(station)
        if feature is not None:
            features.append(feature)

    _logger.debug(
        "Fusion pass complete: %d AVL input(s), %d station(s), %d feature(s)",
        avl_count,
        len(stations),
        len(features),
    )
    return FeatureCollection(features=features)

"""Raw sensor records and their typed payloads.

Records arrive from the persistence query layer as ``{id, data}`` pairs whose
``data`` is keyed by provider field names. :func:`parse_avl` and
:func:`parse_rwis` validate them into :class:`AvlPayload` /
:class:`RwisPayload`, raising :class:`~pyrsi.exceptions.RsiValidationError`
for records the fusion engine cannot place on a map.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pyrsi.exceptions import RsiValidationError
from pyrsi.ingestion.normalize import epoch_seconds, safe_float, safe_str, strict_number
from pyrsi.models._base import RsiBaseModel


class SensorType(StrEnum):
    AVL = "AVL"
    RWIS = "RWIS"


class RawPointRecord(BaseModel):
    """One document returned by the query collaborator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    data: dict[str, Any] = Field(default_factory=dict)


class GeoPoint(BaseModel):
    """Latitude/longitude pair; both must be real numbers."""

    model_config = ConfigDict(frozen=True, extra="ignore", from_attributes=True)

    latitude: float
    longitude: float

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> float:
        number = strict_number(value)
        if number is None:
            raise ValueError(f"coordinate must be numeric, got {value!r}")
        return number


class AvlPayload(RsiBaseModel):
    """Dashcam point: one image per record."""

    sensor_type: ClassVar[SensorType] = SensorType.AVL

    position: GeoPoint | None = Field(default=None, alias="Position")
    timestamp: int | None = Field(default=None, alias="Date")
    image_url: str | None = Field(default=None, alias="IMAGE_URL")
    undefined: float | None = Field(default=None, alias="Undefined")
    bare: float | None = Field(default=None, alias="Bare")
    full: float | None = Field(default=None, alias="Full")
    partly: float | None = Field(default=None, alias="Partly")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return epoch_seconds(value)

    @field_validator("undefined", "bare", "full", "partly", mode="before")
    @classmethod
    def _coerce_probability(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("image_url", mode="before")
    @classmethod
    def _coerce_url(cls, value: Any) -> str | None:
        return safe_str(value)


class RwisPayload(RsiBaseModel):
    """Roadside station image: one record per (station, angle, time)."""

    sensor_type: ClassVar[SensorType] = SensorType.RWIS

    coordinates: GeoPoint | None = Field(default=None, alias="Coordinates")
    timestamp: int | None = Field(default=None, alias="Date")
    image: str | None = Field(default=None, alias="Image")
    gradcam: str | None = Field(default=None, alias="GradCam")
    predicted_class: int | None = Field(default=None, alias="Predicted Class")
    class_1: float | None = Field(default=None, alias="Class 1")
    class_2: float | None = Field(default=None, alias="Class 2")
    class_3: float | None = Field(default=None, alias="Class 3")
    class_4: float | None = Field(default=None, alias="Class 4")

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return epoch_seconds(value)

    @field_validator("predicted_class", mode="before")
    @classmethod
    def _coerce_class(cls, value: Any) -> int | None:
        number = safe_float(value)
        if number is None or not number.is_integer():
            return None
        return int(number)

    @field_validator("class_1", "class_2", "class_3", "class_4", mode="before")
    @classmethod
    def _coerce_probability(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("image", "gradcam", mode="before")
    @classmethod
    def _coerce_url(cls, value: Any) -> str | None:
        return safe_str(value)


SensorPayload = AvlPayload | RwisPayload


def _record_parts(record: Any) -> tuple[str, Any]:
    if isinstance(record, RawPointRecord):
        return record.id, record.data
    if isinstance(record, dict):
        return str(record.get("id") or ""), record.get("data")
    raise RsiValidationError(f"record is not a mapping: {type(record).__name__}")


def _parse(record: Any, model: type[AvlPayload] | type[RwisPayload], location_field: str) -> tuple[str, Any]:
    record_id, data = _record_parts(record)
    if not record_id:
        raise RsiValidationError("record has no id")
    if not isinstance(data, dict):
        raise RsiValidationError("record has no data payload", record_id=record_id)
    try:
        payload = model.model_validate(data)
    except ValidationError as exc:
        raise RsiValidationError(f"malformed {model.sensor_type} record: {exc}", record_id=record_id) from exc
    if getattr(payload, location_field) is None:
        raise RsiValidationError(f"{model.sensor_type} record has no coordinates", record_id=record_id)
    return record_id, payload


def parse_avl(record: Any) -> tuple[str, AvlPayload]:
    """Validate an AVL record, returning ``(record_id, payload)``."""
    record_id, payload = _parse(record, AvlPayload, "position")
    return record_id, payload


def parse_rwis(record: Any) -> tuple[str, RwisPayload]:
    """Validate an RWIS record, returning ``(record_id, payload)``."""
    record_id, payload = _parse(record, RwisPayload, "coordinates")
    return record_id, payload


def coerce_record(value: Any) -> RawPointRecord:
    """Build a :class:`RawPointRecord` from a plain ``{"id", "data"}`` dict."""
    if isinstance(value, RawPointRecord):
        return value
    record_id, data = _record_parts(value)
    return RawPointRecord(id=record_id, data=data if isinstance(data, dict) else {})

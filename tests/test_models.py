from __future__ import annotations

from types import SimpleNamespace

import pytest

from pyrsi.exceptions import RsiValidationError
from pyrsi.models.dashcam import DashcamListing
from pyrsi.models.records import RawPointRecord, RwisPayload, coerce_record, parse_avl, parse_rwis


def test_parse_avl_sentinels_and_timestamp_shapes() -> None:
    record = RawPointRecord(
        id="A1_x",
        data={
            "Position": {"latitude": 41.5, "longitude": -93.6},
            "Date": SimpleNamespace(seconds=1_700_000_123, nanoseconds=5),
            "Bare": "--",
            "Full": "0.4",
            "IMAGE_URL": "",
        },
    )

    record_id, payload = parse_avl(record)

    assert record_id == "A1_x"
    assert payload.timestamp == 1_700_000_123
    assert payload.bare is None
    assert payload.full == 0.4
    assert payload.image_url is None


def test_parse_avl_rejects_string_coordinates() -> None:
    with pytest.raises(RsiValidationError) as exc_info:
        parse_avl({"id": "A1_x", "data": {"Position": {"latitude": "41.5", "longitude": -93.6}}})

    assert exc_info.value.record_id == "A1_x"


def test_parse_rwis_requires_coordinates() -> None:
    with pytest.raises(RsiValidationError):
        parse_rwis({"id": "IDOT-047-02_a", "data": {"Image": "x"}})


def test_parse_rejects_missing_id_and_payload() -> None:
    with pytest.raises(RsiValidationError):
        parse_rwis({"data": {}})
    with pytest.raises(RsiValidationError):
        parse_rwis({"id": "IDOT-047-02_a", "data": None})


def test_rwis_predicted_class_must_be_integral() -> None:
    payload = RwisPayload.model_validate({"Predicted Class": 2.5, "Class 1": 0.9})

    assert payload.predicted_class is None
    assert payload.class_1 == 0.9


def test_coerce_record_from_dict() -> None:
    record = coerce_record({"id": "A1_x", "data": {"Bare": 1}})

    assert record == RawPointRecord(id="A1_x", data={"Bare": 1})
    assert coerce_record(record) is record


def test_dashcam_listing_keeps_extra_fields() -> None:
    listing = DashcamListing.model_validate(
        {
            "data": [
                {
                    "imgurl": "https://example.test/camera/idot_trucks/A31614/A31614_201901121352.jpg",
                    "cid": "A31614",
                    "lat": 41.5,
                }
            ]
        }
    )

    image = listing.data[0]
    assert image.image_key == "A31614_201901121352"
    assert image.payload()["cid"] == "A31614"


def test_dashcam_listing_null_data() -> None:
    assert DashcamListing.model_validate({"data": None}).data == []

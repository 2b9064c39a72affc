"""Detection of archive images that have no stored prediction yet."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pyrsi.models.dashcam import DashcamListing
from pyrsi.models.records import RawPointRecord


def _known_urls(records: Iterable[RawPointRecord], field: str) -> set[str]:
    known: set[str] = set()
    for record in records:
        value = record.data.get(field)
        if isinstance(value, str) and value:
            known.add(value)
    return known


def rwis_image_key(url: str) -> str:
    """``.../IDOT-047-02_201901121352.jpg`` → ``IDOT-047-02_201901121352``."""
    return url.replace(".jpg", "").rsplit("/", 1)[-1]


def missing_avl_predictions(
    listing: DashcamListing,
    known_records: Iterable[RawPointRecord],
) -> dict[str, dict[str, Any]]:
    """Map image key → listing entry for dashcam images with no stored record."""
    known = _known_urls(known_records, "IMAGE_URL")
    missing: dict[str, dict[str, Any]] = {}
    for image in listing.data:
        if image.imgurl not in known:
            missing[image.image_key] = image.payload()
    return missing


def missing_rwis_predictions(
    urls: Iterable[str],
    known_records: Iterable[RawPointRecord],
) -> dict[str, str]:
    """Map image key → URL for archive images with no stored record."""
    known = _known_urls(known_records, "Image")
    return {rwis_image_key(url): url for url in urls if url not in known}

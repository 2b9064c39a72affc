"""Dashcam (AVL) image listing endpoint."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pyrsi._constants import DASHCAM_URL
from pyrsi._transport import Transport
from pyrsi.exceptions import RsiTransportError
from pyrsi.models.dashcam import DashcamListing
from pyrsi.timerange import TimestampLike, to_utc

_logger = logging.getLogger(__name__)


async def fetch_dashcam_listing(
    transport: Transport,
    center: TimestampLike,
    window_minutes: int,
    *,
    url: str = DASHCAM_URL,
) -> DashcamListing:
    """List dashcam images captured within *window_minutes* of *center*."""
    valid = to_utc(center).isoformat().replace("+00:00", "Z")
    params = {"valid": valid, "window": str(window_minutes)}
    body = await transport.get_json(url, params=params)
    try:
        listing = DashcamListing.model_validate(body if isinstance(body, dict) else {})
    except ValidationError as exc:
        raise RsiTransportError(f"Malformed dashcam listing from {url}: {exc}", url=url) from exc
    _logger.debug("Dashcam listing returned %d image(s)", len(listing.data))
    return listing

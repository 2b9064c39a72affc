"""RWIS camera archive scanning.

The public archive exposes one HTML directory index per station and UTC day:
``{base}/{YYYY}/{MM}/{DD}/camera/{station}``. Each image link is named
``IDOT-XXX-YY_YYYYMMDDHHMM.jpg``; the trailing ``HHMM`` is what windows are
matched against.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from bs4 import BeautifulSoup

from pyrsi._api._tasks import MergePolicy, gather_settled, merge
from pyrsi._constants import ARCHIVE_BASE_URL, IMAGE_EXTENSION, IMAGE_PREFIX
from pyrsi._transport import Transport
from pyrsi.exceptions import RsiError
from pyrsi.timerange import DateTimeParts, TimestampLike, is_different_day, is_in_range, to_utc, utc_midnight_after

_logger = logging.getLogger(__name__)


def station_index_url(station_id: str, day: DateTimeParts, base_url: str = ARCHIVE_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{day.year}/{day.month}/{day.day}/camera/{station_id}"


def parse_station_index(html: str, index_url: str) -> list[str]:
    """Extract absolute image URLs from a station directory listing."""
    soup = BeautifulSoup(html, "html.parser")
    urls: list[str] = []
    for link in soup.find_all("a"):
        href = link.get("href")
        if isinstance(href, str) and href.startswith(IMAGE_PREFIX) and href.endswith(IMAGE_EXTENSION):
            urls.append(f"{index_url}/{href}")
    return urls


def image_hhmm(url: str) -> str:
    """``.../IDOT-047-02_201901121352.jpg`` → ``"1352"``."""
    start = url.rfind("_") + 1
    end = url.rfind(".")
    if end < start:
        end = len(url)
    return url[start:end][-4:]


def filter_urls(urls: Iterable[str], start: DateTimeParts, end: DateTimeParts) -> list[str]:
    """Keep URLs whose embedded ``HHMM`` lies within ``[start, end]``."""
    kept: list[str] = []
    for url in urls:
        hhmm = image_hhmm(url)
        if len(hhmm) != 4 or not hhmm.isdigit():
            _logger.debug("Ignoring archive entry without HHMM: %s", url)
            continue
        if is_in_range(hhmm, start, end):
            kept.append(url)
    return kept


async def find_images(
    transport: Transport,
    station_id: str,
    start: TimestampLike,
    end: TimestampLike,
    *,
    base_url: str = ARCHIVE_BASE_URL,
) -> list[str]:
    """List a station's images within ``[start, end]`` on ``start``'s UTC day.

    Fetch and parse failures are logged and produce an empty list.
    """
    s = DateTimeParts(start)
    e = DateTimeParts(end)
    index_url = station_index_url(station_id, s, base_url)
    try:
        html = await transport.get_text(index_url)
        urls = parse_station_index(html, index_url)
    except RsiError as exc:
        _logger.warning("Failed to fetch station index %s: %s", index_url, exc)
        return []
    except Exception:
        _logger.exception("Failed to parse station index %s", index_url)
        return []

    _logger.debug("Found %d image URL(s) for %s", len(urls), index_url)
    return filter_urls(urls, s, e)


def split_window(start: datetime, end: datetime) -> list[tuple[datetime, datetime]]:
    """Split ``[start, end]`` into one piece per UTC day.

    Every piece but the last ends one minute before midnight: archive
    filenames only carry minute precision, so ``23:59`` inclusive is
    ``[.., 24:00)``.
    """
    pieces: list[tuple[datetime, datetime]] = []
    piece_start = start
    while is_different_day(piece_start, end):
        midnight = utc_midnight_after(piece_start)
        pieces.append((piece_start, midnight - timedelta(minutes=1)))
        piece_start = midnight
    pieces.append((piece_start, end))
    return pieces


async def scan_window(
    transport: Transport,
    station_ids: Iterable[str],
    end: TimestampLike,
    *,
    lookback_minutes: float,
    base_url: str = ARCHIVE_BASE_URL,
) -> list[str]:
    """Collect every station image captured in the lookback window before *end*.

    All station/day sub-queries run concurrently; the result is flattened in
    station order.
    """
    end_dt = to_utc(end)
    start_dt = end_dt - timedelta(minutes=lookback_minutes)
    pieces = split_window(start_dt, end_dt)
    if len(pieces) > 1:
        _logger.debug("RWIS scan spans %d UTC days (%s → %s)", len(pieces), start_dt.isoformat(), end_dt.isoformat())

    requests = [
        find_images(transport, station_id, piece_start, piece_end, base_url=base_url)
        for station_id in station_ids
        for piece_start, piece_end in pieces
    ]
    results = merge(await gather_settled(requests), MergePolicy.COLLECT_ALL, label="station scan")

    images = [url for urls in results for url in urls]
    _logger.info("Found %d available RWIS image(s)", len(images))
    return images

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from pyrsi._api.archive import (
    find_images,
    image_hhmm,
    parse_station_index,
    scan_window,
    split_window,
)
from pyrsi.exceptions import RsiTransportError

from _fakes import FakeTransport, station_index_html

BASE = "https://archive.test/data"


def test_parse_station_index_keeps_station_images_only() -> None:
    html = station_index_html(
        "IDOT-047-02_202401121352.jpg",
        "IDOT-047-02_202401121400.png",
        "thumbs/",
        "README.txt",
    )

    urls = parse_station_index(html, f"{BASE}/2024/01/12/camera/IDOT-047-02")

    assert urls == [f"{BASE}/2024/01/12/camera/IDOT-047-02/IDOT-047-02_202401121352.jpg"]


def test_image_hhmm() -> None:
    assert image_hhmm("https://x/IDOT-047-02_202401121352.jpg") == "1352"


@pytest.mark.asyncio
async def test_find_images_filters_by_window(fake_transport: FakeTransport) -> None:
    index = f"{BASE}/2024/01/12/camera/IDOT-047-02"
    fake_transport.text[index] = station_index_html(
        "IDOT-047-02_202401121329.jpg",
        "IDOT-047-02_202401121330.jpg",
        "IDOT-047-02_202401121415.jpg",
        "IDOT-047-02_202401121430.jpg",
        "IDOT-047-02_202401121431.jpg",
    )

    urls = await find_images(
        fake_transport,
        "IDOT-047-02",
        datetime(2024, 1, 12, 13, 30, tzinfo=UTC),
        datetime(2024, 1, 12, 14, 30, tzinfo=UTC),
        base_url=BASE,
    )

    assert [url.rsplit("_", 1)[-1] for url in urls] == ["202401121330.jpg", "202401121415.jpg", "202401121430.jpg"]


@pytest.mark.asyncio
async def test_find_images_fetch_failure_yields_empty(
    fake_transport: FakeTransport,
    caplog: pytest.LogCaptureFixture,
) -> None:
    index = f"{BASE}/2024/01/12/camera/IDOT-047-02"
    fake_transport.text[index] = RsiTransportError("boom", url=index)

    with caplog.at_level(logging.WARNING, logger="pyrsi._api.archive"):
        urls = await find_images(
            fake_transport,
            "IDOT-047-02",
            datetime(2024, 1, 12, 13, 30, tzinfo=UTC),
            datetime(2024, 1, 12, 14, 30, tzinfo=UTC),
            base_url=BASE,
        )

    assert urls == []
    assert index in caplog.text


def test_split_window_same_day() -> None:
    start = datetime(2024, 1, 12, 13, 0, tzinfo=UTC)
    end = datetime(2024, 1, 12, 14, 0, tzinfo=UTC)

    assert split_window(start, end) == [(start, end)]


def test_split_window_across_midnight() -> None:
    start = datetime(2024, 1, 12, 23, 30, tzinfo=UTC)
    end = datetime(2024, 1, 13, 0, 30, tzinfo=UTC)

    assert split_window(start, end) == [
        (start, datetime(2024, 1, 12, 23, 59, tzinfo=UTC)),
        (datetime(2024, 1, 13, 0, 0, tzinfo=UTC), end),
    ]


def test_split_window_multi_day_lookback_yields_one_piece_per_day() -> None:
    start = datetime(2024, 1, 10, 22, 0, tzinfo=UTC)
    end = datetime(2024, 1, 12, 1, 0, tzinfo=UTC)

    assert split_window(start, end) == [
        (start, datetime(2024, 1, 10, 23, 59, tzinfo=UTC)),
        (datetime(2024, 1, 11, 0, 0, tzinfo=UTC), datetime(2024, 1, 11, 23, 59, tzinfo=UTC)),
        (datetime(2024, 1, 12, 0, 0, tzinfo=UTC), end),
    ]


@pytest.mark.asyncio
async def test_scan_window_single_day(fake_transport: FakeTransport) -> None:
    fake_transport.text[f"{BASE}/2024/01/12/camera/IDOT-001-00"] = station_index_html(
        "IDOT-001-00_202401121230.jpg",
        "IDOT-001-00_202401121330.jpg",
    )
    fake_transport.text[f"{BASE}/2024/01/12/camera/IDOT-008-00"] = station_index_html(
        "IDOT-008-00_202401121345.jpg",
    )

    urls = await scan_window(
        fake_transport,
        ["IDOT-001-00", "IDOT-008-00"],
        datetime(2024, 1, 12, 14, 0, tzinfo=UTC),
        lookback_minutes=60,
        base_url=BASE,
    )

    assert [url.rsplit("/", 1)[-1] for url in urls] == [
        "IDOT-001-00_202401121330.jpg",
        "IDOT-008-00_202401121345.jpg",
    ]
    assert len(fake_transport.get_calls) == 2


@pytest.mark.asyncio
async def test_scan_window_across_midnight_queries_both_days(fake_transport: FakeTransport) -> None:
    fake_transport.text[f"{BASE}/2023/12/31/camera/IDOT-001-00"] = station_index_html(
        "IDOT-001-00_202312312320.jpg",
        "IDOT-001-00_202312312345.jpg",
        "IDOT-001-00_202312312359.jpg",
    )
    fake_transport.text[f"{BASE}/2024/01/01/camera/IDOT-001-00"] = station_index_html(
        "IDOT-001-00_202401010000.jpg",
        "IDOT-001-00_202401010015.jpg",
        "IDOT-001-00_202401010031.jpg",
    )

    urls = await scan_window(
        fake_transport,
        ["IDOT-001-00"],
        datetime(2024, 1, 1, 0, 30, tzinfo=UTC),
        lookback_minutes=60,
        base_url=BASE,
    )

    assert [url.rsplit("_", 1)[-1] for url in urls] == [
        "202312312345.jpg",
        "202312312359.jpg",
        "202401010000.jpg",
        "202401010015.jpg",
    ]
    assert [call[0] for call in fake_transport.get_calls] == [
        f"{BASE}/2023/12/31/camera/IDOT-001-00",
        f"{BASE}/2024/01/01/camera/IDOT-001-00",
    ]


@pytest.mark.asyncio
async def test_scan_window_degrades_on_partial_failure(fake_transport: FakeTransport) -> None:
    fake_transport.text[f"{BASE}/2024/01/12/camera/IDOT-001-00"] = station_index_html(
        "IDOT-001-00_202401121330.jpg",
    )
    # IDOT-008-00 is not registered: the fake answers 404.

    urls = await scan_window(
        fake_transport,
        ["IDOT-008-00", "IDOT-001-00"],
        datetime(2024, 1, 12, 14, 0, tzinfo=UTC),
        lookback_minutes=60,
        base_url=BASE,
    )

    assert [url.rsplit("/", 1)[-1] for url in urls] == ["IDOT-001-00_202401121330.jpg"]


@pytest.mark.asyncio
async def test_scan_window_longer_than_a_day_reads_every_day_index(fake_transport: FakeTransport) -> None:
    for day in ("10", "11", "12"):
        fake_transport.text[f"{BASE}/2024/01/{day}/camera/IDOT-001-00"] = station_index_html(
            f"IDOT-001-00_202401{day}2330.jpg",
            f"IDOT-001-00_202401{day}0030.jpg",
        )

    urls = await scan_window(
        fake_transport,
        ["IDOT-001-00"],
        datetime(2024, 1, 12, 1, 0, tzinfo=UTC),
        lookback_minutes=27 * 60,
        base_url=BASE,
    )

    assert [url.rsplit("_", 1)[-1] for url in urls] == [
        "202401102330.jpg",
        "202401112330.jpg",
        "202401110030.jpg",
        "202401120030.jpg",
    ]
    assert [call[0] for call in fake_transport.get_calls] == [
        f"{BASE}/2024/01/{day}/camera/IDOT-001-00" for day in ("10", "11", "12")
    ]

from __future__ import annotations

import asyncio
import logging

import pytest
from _fakes import FakeTransport

from pyrsi._api.backend import BackendGateway, chunk_items
from pyrsi.config import RsiConfig
from pyrsi.exceptions import RsiTransportError

CONFIG = RsiConfig(
    prediction_base_url="https://backend.test",
    warmup_url="https://backend.test/",
    manifest_url="https://docs.test/file-list.json",
)


def test_chunk_items_preserves_order_and_sizes() -> None:
    items = {f"k{i}": i for i in range(7)}

    chunks = chunk_items(items, 3)

    assert [list(chunk) for chunk in chunks] == [["k0", "k1", "k2"], ["k3", "k4", "k5"], ["k6"]]


def test_chunk_items_exact_multiple_and_empty() -> None:
    assert len(chunk_items({"a": 1, "b": 2}, 2)) == 1
    assert chunk_items({}, 5) == []


def test_chunk_items_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        chunk_items({"a": 1}, 0)


@pytest.mark.asyncio
async def test_post_batched_returns_one_response_per_chunk(fake_transport: FakeTransport) -> None:
    gateway = BackendGateway(CONFIG, fake_transport)
    items = {f"img{i}": f"https://x/img{i}.jpg" for i in range(25)}

    responses = await gateway.post_batched(items, 10, "/avl")

    assert len(responses) == 3
    assert [len(payload) for _url, payload in fake_transport.posts] == [10, 10, 5]
    assert {url for url, _payload in fake_transport.posts} == {"https://backend.test/avl"}
    assert responses[0] == {"predicted": sorted(f"img{i}" for i in range(10))}


@pytest.mark.asyncio
async def test_post_batched_empty_sends_nothing(fake_transport: FakeTransport) -> None:
    gateway = BackendGateway(CONFIG, fake_transport)

    assert await gateway.post_batched({}, 10, "") == []
    assert fake_transport.posts == []


@pytest.mark.asyncio
async def test_post_batched_fails_fast_on_any_chunk(
    fake_transport: FakeTransport,
    caplog: pytest.LogCaptureFixture,
) -> None:
    fake_transport.fail_post_when = lambda payload: "img12" in payload
    gateway = BackendGateway(CONFIG, fake_transport)
    items = {f"img{i}": i for i in range(25)}

    with caplog.at_level(logging.ERROR, logger="pyrsi._api.backend"), pytest.raises(RsiTransportError) as exc_info:
        await gateway.post_batched(items, 10, "")

    assert exc_info.value.status_code == 500
    # Every chunk was still issued; the failure is only surfaced afterwards.
    assert len(fake_transport.posts) == 3
    assert "boom" in caplog.text


@pytest.mark.asyncio
async def test_post_batched_raises_after_slow_siblings_settle() -> None:
    finished: list[str] = []

    class _SlowTransport(FakeTransport):
        async def post_json(self, url, payload):  # type: ignore[no-untyped-def]
            if "img0" in payload:
                raise RsiTransportError(f"HTTP 500 from {url}", status_code=500, url=url)
            await asyncio.sleep(0.01)
            finished.extend(payload)
            return {"ok": True}

    gateway = BackendGateway(CONFIG, _SlowTransport())

    with pytest.raises(RsiTransportError):
        await gateway.post_batched({f"img{i}": i for i in range(3)}, 1, "")

    assert sorted(finished) == ["img1", "img2"]


@pytest.mark.asyncio
async def test_warmup_reraises_failure(fake_transport: FakeTransport) -> None:
    gateway = BackendGateway(CONFIG, fake_transport)

    with pytest.raises(RsiTransportError):
        await gateway.warmup(0)


@pytest.mark.asyncio
async def test_warmup_many_tolerates_failures(fake_transport: FakeTransport) -> None:
    outcomes = iter([{"status": "ok"}, RsiTransportError("cold", status_code=503)])

    class _FlakyTransport(FakeTransport):
        async def get_json(self, url, *, params=None):  # type: ignore[no-untyped-def]
            outcome = next(outcomes, {"status": "ok"})
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

    gateway = BackendGateway(CONFIG, _FlakyTransport())

    assert await gateway.warmup_many(4) == 3


@pytest.mark.asyncio
async def test_fetch_manifest_and_document(fake_transport: FakeTransport) -> None:
    fake_transport.json[CONFIG.manifest_url] = ["a.geojson", "b.geojson"]
    fake_transport.json["https://docs.test/a.geojson"] = {"type": "FeatureCollection", "features": []}
    gateway = BackendGateway(CONFIG, fake_transport)

    assert await gateway.fetch_manifest() == ["a.geojson", "b.geojson"]
    assert (await gateway.fetch_document("https://docs.test/a.geojson"))["type"] == "FeatureCollection"


@pytest.mark.asyncio
async def test_fetch_manifest_rejects_non_list(fake_transport: FakeTransport) -> None:
    fake_transport.json[CONFIG.manifest_url] = {"files": []}

    with pytest.raises(RsiTransportError):
        await BackendGateway(CONFIG, fake_transport).fetch_manifest()


@pytest.mark.asyncio
async def test_fetch_document_surfaces_status(fake_transport: FakeTransport) -> None:
    with pytest.raises(RsiTransportError) as exc_info:
        await BackendGateway(CONFIG, fake_transport).fetch_document("https://docs.test/missing.geojson")

    assert exc_info.value.status_code == 404

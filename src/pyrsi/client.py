"""High-level async client tying the data sources to the state store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any, Protocol

import aiohttp

from pyrsi._api.archive import scan_window
from pyrsi._api.backend import BackendGateway
from pyrsi._api.dashcam import fetch_dashcam_listing
from pyrsi._transport import HttpTransport, Transport
from pyrsi.config import RsiConfig
from pyrsi.exceptions import RsiError, RsiValidationError
from pyrsi.fusion import fuse
from pyrsi.models.dashcam import DashcamListing
from pyrsi.models.features import FeatureCollection
from pyrsi.models.records import RawPointRecord, coerce_record
from pyrsi.predictions import missing_avl_predictions, missing_rwis_predictions
from pyrsi.state.keys import StateKey, default_state
from pyrsi.state.store import Store
from pyrsi.timerange import TimestampLike, calculate_range

_logger = logging.getLogger(__name__)


def _coerce_records(items: Sequence[Any] | None, label: str) -> list[RawPointRecord]:
    records: list[RawPointRecord] = []
    for item in items or ():
        try:
            records.append(coerce_record(item))
        except RsiValidationError as exc:
            _logger.warning("Skipping malformed %s record from query: %s", label, exc)
    return records


class QuerySource(Protocol):
    """Persistence layer returning stored, already-classified records.

    RWIS records are requested from *rwis_start* instead of *start* so the
    newest station image is found even near the window edge.
    """

    async def query_by_range(
        self,
        start: datetime,
        end: datetime,
        *,
        rwis_start: datetime,
    ) -> tuple[Sequence[Any], Sequence[Any]]:
        ...


class RsiClient:
    """Async client for the road-surface pipeline.

    Usage::

        async with RsiClient(config, source) as client:
            await client.warmup()
            collection = await client.start_query("2024-01-12T14:00:00Z", 30)
    """

    def __init__(
        self,
        config: RsiConfig,
        source: QuerySource,
        *,
        store: Store | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._source = source
        self._store = store if store is not None else Store(default_state(), production=config.is_production)
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._owns_transport = transport is None
        self._gateway: BackendGateway | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RsiClient:
        if self._owns_transport:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self._config.timeout_seconds),
                )
            self._transport = HttpTransport(self._http_session)
        assert self._transport is not None  # noqa: S101
        self._gateway = BackendGateway(self._config, self._transport)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_transport:
            self._transport = None
        self._gateway = None

    @property
    def store(self) -> Store:
        return self._store

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RsiError("Client not initialized. Use 'async with RsiClient(...) as client:'")
        return self._transport

    def _require_gateway(self) -> BackendGateway:
        if self._gateway is None:
            raise RsiError("Client not initialized. Use 'async with RsiClient(...) as client:'")
        return self._gateway

    async def _query(self, start: datetime, end: datetime) -> tuple[list[RawPointRecord], list[RawPointRecord]]:
        rwis_start = end - timedelta(minutes=self._config.rwis_lookback_minutes)
        avl, rwis = await self._source.query_by_range(start, end, rwis_start=rwis_start)
        avl_records = _coerce_records(avl, "AVL")
        rwis_records = _coerce_records(rwis, "RWIS")
        _logger.info("Query results retrieved: %d AVL, %d RWIS", len(avl_records), len(rwis_records))
        return avl_records, rwis_records

    def _publish(self, avl: Sequence[RawPointRecord], rwis: Sequence[RawPointRecord]) -> FeatureCollection:
        collection = fuse(avl, rwis)
        self._store.set(StateKey.CURRENT_GEOJSON, collection)
        return collection

    # ------------------------------------------------------------------
    # Backend
    # ------------------------------------------------------------------

    async def warmup(self) -> int:
        """Spin up backend containers ahead of the first prediction batch."""
        return await self._require_gateway().warmup_many(self._config.warmup_containers)

    async def post_predictions(self, items: Mapping[str, Any], chunk_size: int, endpoint: str) -> list[Any]:
        return await self._require_gateway().post_batched(items, chunk_size, endpoint)

    async def fetch_manifest(self) -> list[str]:
        return await self._require_gateway().fetch_manifest()

    async def fetch_document(self, url: str) -> Any:
        return await self._require_gateway().fetch_document(url)

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    async def get_dashcam_listing(self, center: TimestampLike, window_minutes: int) -> DashcamListing:
        return await fetch_dashcam_listing(
            self._require_transport(),
            center,
            window_minutes,
            url=self._config.dashcam_url,
        )

    async def find_rwis_images(self, end: datetime) -> list[str]:
        return await scan_window(
            self._require_transport(),
            self._config.station_ids,
            end,
            lookback_minutes=self._config.rwis_lookback_minutes,
            base_url=self._config.archive_base_url,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def refresh(self, center: TimestampLike, window_minutes: int) -> FeatureCollection:
        """Re-query stored records, fuse them and publish the result."""
        start, end = calculate_range(center, window_minutes)
        avl, rwis = await self._query(start, end)
        return self._publish(avl, rwis)

    async def _predict_then_refresh(
        self,
        label: str,
        items: Mapping[str, Any],
        chunk_size: int,
        endpoint: str,
        center: TimestampLike,
        window_minutes: int,
    ) -> None:
        if not items:
            _logger.info("No %s predictions needed", label)
            return
        _logger.info("Requesting %d %s prediction(s)", len(items), label)
        try:
            await self.post_predictions(items, chunk_size, endpoint)
        except RsiError:
            # Stale classifications stay on the map; the refresh still runs.
            _logger.exception("%s prediction batch failed", label)
        await self.refresh(center, window_minutes)

    async def start_query(self, center: TimestampLike, window_minutes: int) -> FeatureCollection:
        """Run a full query for the window around *center*.

        1. Query stored records and publish an initial fusion.
        2. List dashcam and station images actually available in the archive.
        3. Request predictions for images with no stored record, then
           re-query and re-publish once each batch settles.

        Returns the last published collection.
        """
        start, end = calculate_range(center, window_minutes)
        _logger.info("Starting query %s → %s", start.isoformat(), end.isoformat())

        avl, rwis = await self._query(start, end)
        self._publish(avl, rwis)

        try:
            listing = await self.get_dashcam_listing(center, window_minutes)
        except RsiError as exc:
            _logger.warning("Dashcam listing unavailable, skipping AVL predictions: %s", exc)
            listing = DashcamListing()
        rwis_urls = await self.find_rwis_images(end)

        avl_missing = missing_avl_predictions(listing, avl)
        rwis_missing = missing_rwis_predictions(rwis_urls, rwis)

        await asyncio.gather(
            self._predict_then_refresh(
                "AVL",
                avl_missing,
                self._config.avl_chunk_size,
                self._config.avl_endpoint,
                center,
                window_minutes,
            ),
            self._predict_then_refresh(
                "RWIS",
                rwis_missing,
                self._config.rwis_chunk_size,
                self._config.rwis_endpoint,
                center,
                window_minutes,
            ),
        )
        collection: FeatureCollection = self._store.get(StateKey.CURRENT_GEOJSON)
        return collection

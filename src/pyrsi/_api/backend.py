"""Prediction backend and document host.

Endpoints:
  - warmup URL (GET, no payload) spins up backend containers
  - ``{prediction_base_url}{endpoint}`` (POST) takes ``{image_key: payload}``
    batches and returns classification payloads
  - manifest URL (GET) lists interpolation documents
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, TypeVar

from pyrsi._api._tasks import MergePolicy, gather_settled, merge
from pyrsi._transport import Transport
from pyrsi.config import RsiConfig
from pyrsi.exceptions import RsiTransportError

_logger = logging.getLogger(__name__)

V = TypeVar("V")


def chunk_items(items: Mapping[str, V], size: int) -> list[dict[str, V]]:
    """Split *items* into ordered chunks of at most *size* entries."""
    if size < 1:
        raise ValueError(f"chunk size must be at least 1, got {size}")
    chunks: list[dict[str, V]] = []
    current: dict[str, V] = {}
    for key, value in items.items():
        current[key] = value
        if len(current) == size:
            chunks.append(current)
            current = {}
    if current:
        chunks.append(current)
    return chunks


class BackendGateway:
    """Talks to the prediction backend and the manifest/document host."""

    def __init__(self, config: RsiConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def warmup(self, index: int) -> Any:
        """Ping the backend once so a container is ready before predictions.

        Failures are logged and re-raised; :meth:`warmup_many` decides how
        tolerant to be.
        """
        url = self._config.warmup_url
        started = time.monotonic()
        try:
            data = await self._transport.get_json(url)
        except RsiTransportError as exc:
            _logger.error(
                "Backend warmup %d failed after %.0f ms: %s",
                index,
                (time.monotonic() - started) * 1000,
                exc,
            )
            raise
        _logger.debug("Backend warmup %d completed in %.0f ms", index, (time.monotonic() - started) * 1000)
        return data

    async def warmup_many(self, count: int) -> int:
        """Fire *count* warmups concurrently; return how many succeeded."""
        results = await gather_settled(self.warmup(i) for i in range(count))
        succeeded = merge(results, MergePolicy.COLLECT_ALL, label="warmup")
        _logger.info("Backend warmup: %d/%d succeeded", len(succeeded), count)
        return len(succeeded)

    async def _post_chunk(self, url: str, chunk: dict[str, Any], index: int, total: int) -> Any:
        started = time.monotonic()
        try:
            response = await self._transport.post_json(url, chunk)
        except RsiTransportError as exc:
            _logger.error(
                "Prediction chunk %d/%d to %s failed (status=%s): %s",
                index,
                total,
                url,
                exc.status_code,
                exc.body or exc,
            )
            raise
        _logger.debug(
            "Prediction chunk %d/%d completed in %.0f ms",
            index,
            total,
            (time.monotonic() - started) * 1000,
        )
        return response

    async def post_batched(self, items: Mapping[str, Any], chunk_size: int, endpoint: str) -> list[Any]:
        """POST *items* in chunks of *chunk_size*, concurrently.

        Returns the parsed responses in chunk order. Any failed chunk fails
        the whole batch: partial prediction data is not merged silently.

        The first failure (in chunk order) is raised only once every chunk
        has settled, so a slow or hung sibling delays the error by up to the
        session timeout. No request is left running after this returns.
        """
        chunks = chunk_items(items, chunk_size)
        if not chunks:
            return []
        url = f"{self._config.prediction_base_url}{endpoint}"
        _logger.debug("Posting %d item(s) to %s in %d chunk(s)", len(items), url, len(chunks))

        results = await gather_settled(
            self._post_chunk(url, chunk, index, len(chunks)) for index, chunk in enumerate(chunks, start=1)
        )
        return merge(results, MergePolicy.FAIL_FAST, label="prediction chunk")

    async def fetch_manifest(self) -> list[str]:
        """Fetch the list of available interpolation document names."""
        files = await self._transport.get_json(self._config.manifest_url)
        if not isinstance(files, list):
            raise RsiTransportError(
                f"Manifest at {self._config.manifest_url} is not a JSON array",
                url=self._config.manifest_url,
            )
        _logger.debug("Fetched %d manifest entries", len(files))
        return [str(name) for name in files]

    async def fetch_document(self, url: str) -> Any:
        """Fetch one JSON document (e.g. an interpolation GeoJSON)."""
        document = await self._transport.get_json(url)
        _logger.debug("Fetched document %s", url)
        return document

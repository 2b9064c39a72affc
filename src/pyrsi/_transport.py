"""HTTP transport with explicit status checking and JSON decoding."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyrsi.exceptions import RsiTransportError

_logger = logging.getLogger(__name__)

_BODY_PREVIEW = 500


class Transport(Protocol):
    """Structural transport interface used by the archive and backend modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        ...

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        ...

    async def post_json(self, url: str, payload: Any) -> Any:
        ...


def _decode_json(url: str, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise RsiTransportError(
            f"Invalid JSON from {url}: {text[:200]}",
            url=url,
            body=text[:_BODY_PREVIEW],
        ) from exc


class HttpTransport:
    """aiohttp-backed transport.

    Every non-2xx response is a hard failure carrying the status code and a
    preview of the response body.
    """

    def __init__(self, http_session: aiohttp.ClientSession) -> None:
        self._http = http_session

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        payload: Any = None,
    ) -> str:
        headers: dict[str, str] = {"accept": "application/json, text/html;q=0.9"}
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json"
            body = json.dumps(payload)

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(method, url, params=params, data=body, headers=headers) as resp:
                # Error pages from proxies are not always valid UTF-8.
                text = await resp.text(errors="replace")
                if not 200 <= resp.status < 300:
                    _logger.error(
                        "%s %s failed with HTTP %s: %s",
                        method,
                        url,
                        resp.status,
                        text[:_BODY_PREVIEW],
                    )
                    raise RsiTransportError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        status_code=resp.status,
                        url=url,
                        body=text[:_BODY_PREVIEW],
                    )
        except RsiTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RsiTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc
        except (UnicodeError, LookupError) as exc:
            raise RsiTransportError(f"Undecodable response from {url}: {exc}", url=url) from exc
        return text

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        return await self._request("GET", url, params=params)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        return _decode_json(url, await self._request("GET", url, params=params))

    async def post_json(self, url: str, payload: Any) -> Any:
        return _decode_json(url, await self._request("POST", url, payload=payload))

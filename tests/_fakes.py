"""Test doubles shared across the suite."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pyrsi.exceptions import RsiTransportError


@dataclass
class FakeTransport:
    """In-memory stand-in for ``HttpTransport``.

    Responses are looked up by URL; an ``Exception`` value is raised instead
    of returned. Unknown URLs behave like a 404.
    """

    text: dict[str, Any] = field(default_factory=dict)
    json: dict[str, Any] = field(default_factory=dict)
    post_responses: dict[str, Any] = field(default_factory=dict)
    get_calls: list[tuple[str, dict[str, str] | None]] = field(default_factory=list)
    posts: list[tuple[str, Any]] = field(default_factory=list)
    fail_post_when: Callable[[Any], bool] | None = None

    @staticmethod
    def _resolve(table: dict[str, Any], url: str) -> Any:
        if url not in table:
            raise RsiTransportError(f"HTTP 404 from {url}", status_code=404, url=url, body="not found")
        value = table[url]
        if isinstance(value, Exception):
            raise value
        return value

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        self.get_calls.append((url, dict(params) if params else None))
        return self._resolve(self.text, url)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        self.get_calls.append((url, dict(params) if params else None))
        return self._resolve(self.json, url)

    async def post_json(self, url: str, payload: Any) -> Any:
        self.posts.append((url, payload))
        if self.fail_post_when is not None and self.fail_post_when(payload):
            raise RsiTransportError(f"HTTP 500 from {url}", status_code=500, url=url, body="boom")
        response = self.post_responses.get(url)
        if callable(response):
            return response(payload)
        return response if response is not None else {"predicted": sorted(payload)}


def station_index_html(*hrefs: str) -> str:
    links = "\n".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return f"<html><body><a href='../'>Parent</a>\n{links}</body></html>"

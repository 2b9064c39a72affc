"""Keyed publish/subscribe state store.

``set`` compares by identity, not equality: storing the very same object again
is a no-op, while a structurally equal but distinct object notifies
subscribers. Callers build a new container to force an update.

All operations are synchronous and assume a single writer (the event loop
thread). Subscribers run inline, in registration order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from pyrsi.exceptions import RsiError

_logger = logging.getLogger(__name__)

Subscriber = Callable[[Any], object]


class Store:
    """In-memory keyed value map with per-key subscribers.

    Parameters
    ----------
    initial
        Optional seed values.
    production
        Disables :meth:`reset`; see :attr:`RsiConfig.is_production`.
    """

    def __init__(
        self,
        initial: Mapping[str, Any] | None = None,
        *,
        production: bool = False,
    ) -> None:
        self._production = production
        self._values: dict[str, Any] = dict(initial or {})
        # dict-as-ordered-set: insertion order is notification order
        self._subscribers: dict[str, dict[Subscriber, None]] = {}

    def get(self, key: str) -> Any:
        """Return the stored value, or ``None`` when *key* was never set."""
        value = self._values.get(key)
        _logger.debug("get %s -> %s", key, type(value).__name__)
        return value

    def set(self, key: str, value: Any) -> None:
        """Store *value* and notify the subscribers of *key*.

        A value that ``is`` the stored one is ignored. A failing subscriber
        is logged and skipped; it neither stops the remaining subscribers nor
        rolls back the new value.
        """
        if key in self._values and self._values[key] is value:
            _logger.debug("State unchanged for key %s, skipping update", key)
            return
        self._values[key] = value

        callbacks = list(self._subscribers.get(key, ()))
        _logger.debug("Notifying %d subscriber(s) for key %s", len(callbacks), key)
        for callback in callbacks:
            try:
                callback(value)
            except Exception:
                _logger.exception("Subscriber %r for key %s failed", callback, key)

    def subscribe(self, key: str, callback: Subscriber) -> None:
        """Register *callback* for *key*; non-callables are logged and ignored."""
        if not callable(callback):
            _logger.warning("Ignoring non-callable subscriber for key %s: %r", key, callback)
            return
        self._subscribers.setdefault(key, {})[callback] = None

    def unsubscribe(self, key: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(key)
        if callbacks is None:
            return
        callbacks.pop(callback, None)
        if not callbacks:
            del self._subscribers[key]

    def subscriber_count(self, key: str) -> int:
        return len(self._subscribers.get(key, ()))

    def keys(self) -> Iterator[str]:
        return iter(list(self._values))

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def reset(self) -> None:
        """Drop every value and every subscriber. Test-only.

        Raises
        ------
        RsiError
            If the store was created with ``production=True``.
        """
        if self._production:
            raise RsiError("Store.reset is not available in production")
        self._values = {}
        self._subscribers = {}

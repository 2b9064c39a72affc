"""Concurrent sub-request helpers.

Sibling requests are launched together and each outcome is captured as a
:class:`Settled` value; the call site then picks an explicit
:class:`MergePolicy` instead of relying on whichever exception surfaces first.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class MergePolicy(enum.Enum):
    FAIL_FAST = "fail_fast"
    """Any failed task fails the group (first failure in input order is raised)."""
    COLLECT_ALL = "collect_all"
    """Failed tasks are logged and dropped; successful values are returned."""


@dataclass(frozen=True, slots=True)
class Settled(Generic[T]):
    """Outcome of one task: exactly one of ``value``/``error`` is meaningful."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _settle(aw: Awaitable[T]) -> Settled[T]:
    try:
        return Settled(value=await aw)
    except asyncio.CancelledError:
        raise
    except Exception as exc:  # noqa: BLE001
        return Settled(error=exc)


async def gather_settled(aws: Iterable[Awaitable[T]]) -> list[Settled[T]]:
    """Run *aws* concurrently and return their outcomes in input order."""
    return list(await asyncio.gather(*(_settle(aw) for aw in aws)))


def merge(results: Iterable[Settled[T]], policy: MergePolicy, *, label: str = "task") -> list[T]:
    """Collapse settled results according to *policy*."""
    values: list[T] = []
    failures: list[BaseException] = []
    for result in results:
        if result.error is not None:
            failures.append(result.error)
        else:
            values.append(result.value)  # type: ignore[arg-type]

    if failures and policy is MergePolicy.FAIL_FAST:
        raise failures[0]
    if failures:
        _logger.warning("%d of %d %s(s) failed", len(failures), len(failures) + len(values), label)
    return values

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
import time
from typing import Awaitable, Callable, Generic, Iterable, Literal, TypeVar

from ..models import FetchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

Provenance = Literal["live", "cached", "stale", "fallback"]


@dataclass(frozen=True)
class FeedSnapshot(Generic[T]):
    items: tuple[T, ...]
    provenance: Provenance
    fetched_at: datetime | None
    age_seconds: float | None

    def to_dict(self) -> dict[str, object]:
        return {
            "provenance": self.provenance,
            "fetchedAt": self.fetched_at.isoformat() if self.fetched_at else None,
            "ageSeconds": None if self.age_seconds is None else round(self.age_seconds, 1),
            "count": len(self.items),
        }


@dataclass(frozen=True)
class _Entry(Generic[T]):
    items: tuple[T, ...]
    stored_at: float
    fetched_at: datetime


class SnapshotCache(Generic[T]):
    """Last-good snapshot of one upstream feed with a TTL and a static fallback.

    A fresh entry is served without touching the upstream. Once the entry is
    older than ``ttl_seconds`` the next ``get()`` refreshes it; a non-empty
    result replaces the entry, anything else leaves the old items in place and
    reports them as stale. The fallback is only served while no refresh has
    ever succeeded.

    Callers that arrive while a refresh is running wait on the same task, and
    cancelling one of them does not cancel the refresh.
    """

    def __init__(
        self,
        name: str,
        *,
        ttl_seconds: float,
        fetch: Callable[[], Awaitable[FetchResult[T]]],
        fallback: Callable[[], Iterable[T]],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._fetch = fetch
        self._fallback = fallback
        self._clock = clock
        self._entry: _Entry[T] | None = None
        self._inflight: asyncio.Task[FeedSnapshot[T]] | None = None
        self.last_result: FetchResult[T] | None = None

    @property
    def has_data(self) -> bool:
        return self._entry is not None

    def _age(self, entry: _Entry[T]) -> float:
        return max(0.0, self._clock() - entry.stored_at)

    def _is_fresh(self, entry: _Entry[T] | None) -> bool:
        return entry is not None and self._age(entry) < self.ttl_seconds

    def _snapshot(self, entry: _Entry[T], provenance: Provenance) -> FeedSnapshot[T]:
        return FeedSnapshot(
            items=entry.items,
            provenance=provenance,
            fetched_at=entry.fetched_at,
            age_seconds=self._age(entry),
        )

    def _fallback_snapshot(self) -> FeedSnapshot[T]:
        return FeedSnapshot(
            items=tuple(self._fallback()),
            provenance="fallback",
            fetched_at=None,
            age_seconds=None,
        )

    def peek(self) -> FeedSnapshot[T]:
        """Current view without refreshing."""
        entry = self._entry
        if entry is None:
            return self._fallback_snapshot()
        return self._snapshot(entry, "cached" if self._is_fresh(entry) else "stale")

    async def get(self) -> FeedSnapshot[T]:
        entry = self._entry
        if self._is_fresh(entry):
            assert entry is not None
            return self._snapshot(entry, "cached")

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._refresh())
        return await asyncio.shield(self._inflight)

    async def _refresh(self) -> FeedSnapshot[T]:
        try:
            result = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("snapshot_refresh_failed feed=%s", self.name, exc_info=True)
            result = FetchResult.failed("exception")
        self.last_result = result

        if result.is_ok:
            entry = _Entry(
                items=tuple(result.items),
                stored_at=self._clock(),
                fetched_at=datetime.now(timezone.utc),
            )
            self._entry = entry
            logger.info("snapshot_refreshed feed=%s count=%s", self.name, len(entry.items))
            return self._snapshot(entry, "live")

        previous = self._entry
        if previous is not None:
            logger.info(
                "snapshot_serving_stale feed=%s status=%s reason=%s age_seconds=%.1f",
                self.name,
                result.status,
                result.reason,
                self._age(previous),
            )
            return self._snapshot(previous, "stale")

        logger.info(
            "snapshot_serving_fallback feed=%s status=%s reason=%s",
            self.name,
            result.status,
            result.reason,
        )
        return self._fallback_snapshot()

"""
Single-slot, time-boxed cache for the screening payload.

The slot is replaced wholesale on every recompute and never mutated in
place.  Expiry is checked at read time against ``ttl_s``; there is no
background eviction.  Concurrent misses are single-flight: the freshness
check is repeated under an asyncio.Lock so only one caller recomputes and
the others receive its result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_S: float = 300.0


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    payload: T
    computed_at: float


class ScreeningCache(Generic[T]):
    def __init__(
        self,
        ttl_s: float = DEFAULT_TTL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entry: CacheEntry[T] | None = None
        self._lock = asyncio.Lock()

    @property
    def entry(self) -> CacheEntry[T] | None:
        return self._entry

    def is_fresh(self) -> bool:
        return self._entry is not None and (self._clock() - self._entry.computed_at) < self.ttl_s

    def peek(self) -> T | None:
        """Fresh payload or None, without recomputing."""
        return self._entry.payload if self.is_fresh() else None

    def invalidate(self) -> None:
        self._entry = None

    async def get(self, compute: Callable[[], Awaitable[T]], force: bool = False) -> T:
        if not force and self.is_fresh():
            logger.info("[Cache] hit")
            return self._entry.payload

        seen = self._entry
        async with self._lock:
            # Another caller may have refreshed the slot while we waited
            if self.is_fresh() and (not force or self._entry is not seen):
                logger.info("[Cache] hit after wait")
                return self._entry.payload
            logger.info("[Cache] miss, recomputing")
            payload = await compute()
            self._entry = CacheEntry(payload=payload, computed_at=self._clock())
            return payload

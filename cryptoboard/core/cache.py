from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from loguru import logger

Compute = Callable[[], Awaitable[Any]]

@dataclass
class _Entry:
    value: Any
    expires_at: float

class TTLCache:
    """In-process cache of computed values with a per-entry time-to-live.

    Lazy reads go through get_or_compute; the scheduler calls refresh with the
    same compute function. There is no versioning: the last write wins.
    """

    def __init__(self, default_ttl: float, clock: Callable[[], float] = time.monotonic):
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def _live(self, key: str) -> _Entry | None:
        entry = self._entries.get(key)
        if entry is None or entry.expires_at <= self._clock():
            return None
        return entry

    def _set(self, key: str, value: Any, ttl: float | None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        self._entries[key] = _Entry(value=value, expires_at=self._clock() + ttl)

    async def refresh(self, key: str, compute: Compute, ttl: float | None = None) -> Any:
        value = await compute()
        self._set(key, value, ttl)
        logger.debug(f"Cache key {key!r} recomputed")
        return value

    async def get_or_compute(self, key: str, compute: Compute, ttl: float | None = None) -> Any:
        entry = self._live(key)
        if entry is not None:
            return entry.value
        return await self.refresh(key, compute, ttl)

"""Cache interface, TTL parsing and the in-memory backend."""

from __future__ import annotations

import asyncio
import copy
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Protocol

from .config import settings

log = logging.getLogger(__name__)

_TTL_PATTERN = re.compile(r"(\d+)([smhd])")
_UNIT_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}


def now_ms() -> float:
    return time.time() * 1000


def parse_ttl(ttl: str) -> int:
    """Parse ``<integer>[smhd]`` (e.g. ``"30s"``, ``"7d"``) into milliseconds."""
    match = _TTL_PATTERN.fullmatch(ttl) if isinstance(ttl, str) else None
    if match is None:
        raise ValueError(f"Invalid TTL format: {ttl!r}")
    amount, unit = match.groups()
    return int(amount) * _UNIT_MS[unit]


@dataclass
class CacheEntry:
    val: Any
    exp: float  # epoch ms

    def is_expired(self, at_ms: float | None = None) -> bool:
        return self.exp <= (now_ms() if at_ms is None else at_ms)


class Cache(Protocol):
    async def get(self, key: str) -> CacheEntry | None: ...

    async def set(self, key: str, val: Any, ttl_ms: float) -> None: ...


class InMemoryCache:
    """Process-local cache with lazy expiry and an optional sweeper task."""

    def __init__(self, cleanup_interval: float | None = None) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._cleanup_interval = (
            cleanup_interval
            if cleanup_interval is not None
            else settings.cache_cleanup_interval_seconds
        )
        self._cleanup_task: asyncio.Task | None = None

    async def get(self, key: str) -> CacheEntry | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired():
                del self._entries[key]
                return None
            # Values are copied in and out.
            return CacheEntry(val=copy.deepcopy(entry.val), exp=entry.exp)

    async def set(self, key: str, val: Any, ttl_ms: float) -> None:
        async with self._lock:
            self._entries[key] = CacheEntry(val=copy.deepcopy(val), exp=now_ms() + ttl_ms)

    async def cleanup(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        async with self._lock:
            at = now_ms()
            expired = [k for k, e in self._entries.items() if e.is_expired(at)]
            for key in expired:
                del self._entries[key]
            return len(expired)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Background sweeper
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def start(self) -> None:
        """Start the periodic sweeper on the running event loop."""
        if self.running:
            return
        self._cleanup_task = asyncio.create_task(self._cleanup_loop())

    async def stop(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self._cleanup_interval)
            evicted = await self.cleanup()
            if evicted:
                log.info("Evicted %d expired cache entry/entries.", evicted)

"""In-memory TTL cache for computed metrics responses."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import date
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class MetricsCache:
    """Dict + monotonic clock TTL cache shared by the threadpool endpoints.

    Concurrent misses on the same key compute twice and the last writer wins.
    Expired entries are dropped on read and swept on every write.
    """

    def __init__(self, ttl_seconds: float = 60.0) -> None:
        self._ttl = ttl_seconds
        self._store: dict[str, tuple[float, Any]] = {}

    @staticmethod
    def key(kind: str, start: date, end: date, symbol: str | None = None) -> str:
        """Cache key for a windowed request, e.g. ``metrics:2024-01-01:2024-01-31:*``."""
        return f"{kind}:{start.isoformat()}:{end.isoformat()}:{symbol or '*'}"

    def get(self, key: str) -> Any | None:
        """Return cached value or ``None`` if missing / expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        ts, value = entry
        if time.monotonic() - ts > self._ttl:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        now = time.monotonic()
        self._evict_expired(now)
        self._store[key] = (now, value)

    def _evict_expired(self, now: float) -> None:
        expired = [k for k, (ts, _) in list(self._store.items()) if now - ts > self._ttl]
        for k in expired:
            self._store.pop(k, None)

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for *key*, computing and storing it on a miss."""
        value = self.get(key)
        if value is not None:
            logger.debug("Metrics cache hit", key=key)
            return value
        value = compute()
        self.set(key, value)
        return value

    def invalidate(self, key: str) -> None:
        """Remove a single key (no-op if absent)."""
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

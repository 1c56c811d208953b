"""In-process TTL cache for listing responses.

Notes:
- Per-process only: every worker holds its own copy and its own invalidations.
- Thread-safe: sync endpoints run on a threadpool, so all access to the
  store happens under a lock.
- Values are deep-copied on the way in and on the way out; mutating an
  object after ``set`` or after ``get`` never changes what is cached.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from app.adapters.cache.base import AbstractCache

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cached value with its absolute expiry (epoch milliseconds)."""

    value: Any
    expires_at: int


class InMemoryTTLCache(AbstractCache):
    """Dictionary-backed cache with per-entry time-to-live.

    Expired entries are never returned. They are removed lazily when read,
    or in bulk by ``cleanup()``, which the application runs periodically so
    keys that are written but never read again do not accumulate.
    """

    def __init__(
        self,
        default_ttl_seconds: float = 60,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            default_ttl_seconds: TTL applied when ``set`` gets no explicit TTL.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If default_ttl_seconds is not positive.
        """
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be > 0")

        self._default_ttl_ms = int(default_ttl_seconds * 1000)
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLCache(default_ttl_seconds={self._default_ttl_ms / 1000}, "
            f"size={len(self._store)}, hits={self._hits}, misses={self._misses})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _now_ms(self) -> int:
        return round(self._clock() * 1000)

    def get(self, key: str) -> Any | None:
        """Return a copy of the cached value, or None when absent or expired.

        A stale entry found by the lookup is removed.
        """

        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:64], "reason": "not_found"})
                return None

            if self._now_ms() > entry.expires_at:
                del self._store[key]
                self._evictions += 1
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:64], "reason": "expired"})
                return None

            self._hits += 1
            logger.debug("cache.hit", extra={"cache_key": key[:64]})
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store value under key; last writer wins.

        Args:
            key: Cache key.
            value: Payload to cache (copied).
            ttl_seconds: Entry lifetime; the default TTL applies when None.
        """

        ttl_ms = self._default_ttl_ms if ttl_seconds is None else int(ttl_seconds * 1000)
        stored = copy.deepcopy(value)

        with self._lock:
            self._store[key] = CacheEntry(value=stored, expires_at=self._now_ms() + ttl_ms)
            size = len(self._store)

        logger.debug(
            "cache.set",
            extra={"cache_key": key[:64], "size": size, "ttl_ms": ttl_ms},
        )

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        """Remove every entry. Hit/miss counters are kept."""

        with self._lock:
            dropped = len(self._store)
            self._store.clear()

        logger.info("cache.clear", extra={"entries_dropped": dropped})

    def cleanup(self) -> int:
        with self._lock:
            now = self._now_ms()
            expired = [k for k, entry in self._store.items() if now > entry.expires_at]
            for key in expired:
                del self._store[key]
            self._evictions += len(expired)
            remaining = len(self._store)

        if expired:
            logger.debug(
                "cache.cleanup",
                extra={"removed": len(expired), "size": remaining},
            )
        return len(expired)

    def stats(self) -> dict[str, int | float]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "default_ttl_seconds": self._default_ttl_ms / 1000,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

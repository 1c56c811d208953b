"""Process-lifetime services and their background maintenance.

``AppServices`` owns the cache, the rate limiter, the repositories and the
sweeper. One instance is built by the FastAPI lifespan at startup, stored
on ``app.state.services`` and handed to request handlers through the
dependencies below; shutdown stops the sweeper.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from fastapi import Request

from app.adapters.cache import AbstractCache, InMemoryTTLCache
from app.adapters.rate_limit import AbstractRateLimiter, InMemoryFixedWindowRateLimiter
from app.adapters.repositories import (
    AbstractProductRepository,
    AbstractProductTypeRepository,
    InMemoryProductRepository,
    InMemoryProductTypeRepository,
)
from app.core.config import AppSettings

logger = logging.getLogger(__name__)

SweepFn = Callable[[], int]


class PeriodicSweeper:
    """Cancellable asyncio task calling sweep functions at a fixed period.

    Each sweep function removes expired state and returns how many entries
    it dropped. A failing sweep is logged and the loop keeps running.
    """

    def __init__(self, sweeps: Sequence[tuple[str, SweepFn]], *, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._sweeps = list(sweeps)
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self) -> dict[str, int]:
        """Run every sweep synchronously and report removed entries per sweep."""

        removed: dict[str, int] = {}
        for name, sweep in self._sweeps:
            try:
                removed[name] = sweep()
            except Exception:
                logger.exception("sweeper.failed", extra={"sweep": name})
                continue
        logger.debug("sweeper.run", extra={"removed": removed})
        return removed

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="periodic-sweeper")
        logger.info("sweeper.started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("sweeper.stopped")


@dataclass
class AppServices:
    """Explicitly owned application state shared by all request handlers."""

    cache: AbstractCache
    rate_limiter: AbstractRateLimiter
    products: AbstractProductRepository
    product_types: AbstractProductTypeRepository
    cleanup_interval_seconds: float = 300
    sweeper: PeriodicSweeper = field(init=False)

    def __post_init__(self) -> None:
        self.sweeper = PeriodicSweeper(
            [("cache", self.cache.cleanup), ("rate_limit", self.rate_limiter.cleanup)],
            interval_seconds=self.cleanup_interval_seconds,
        )

    @classmethod
    def from_settings(cls, app_settings: AppSettings) -> "AppServices":
        return cls(
            cache=InMemoryTTLCache(default_ttl_seconds=app_settings.cache_default_ttl_seconds),
            rate_limiter=InMemoryFixedWindowRateLimiter(
                max_requests=app_settings.rate_limit_max_requests,
                window_ms=app_settings.rate_limit_window_ms,
            ),
            products=InMemoryProductRepository(),
            product_types=InMemoryProductTypeRepository(),
            cleanup_interval_seconds=app_settings.cleanup_interval_seconds,
        )

    async def startup(self) -> None:
        self.sweeper.start()

    async def shutdown(self) -> None:
        await self.sweeper.stop()


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return get_services(request).rate_limiter

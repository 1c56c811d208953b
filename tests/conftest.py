"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any app import so the module-level
settings object picks them up.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_ADMIN_TOKEN_REQUIRED", "true")
os.environ.setdefault("APP_ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from app.adapters.cache import InMemoryTTLCache
from app.adapters.rate_limit import InMemoryFixedWindowRateLimiter
from app.adapters.repositories import InMemoryProductRepository, InMemoryProductTypeRepository
from app.core.app_factory import create_app
from app.core.lifecycle import AppServices


class FakeClock:
    """Deterministic clock (UNIX seconds) used to test expiration logic."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def services(clock: FakeClock) -> AppServices:
    """Fresh services sharing one fake clock."""
    return AppServices(
        cache=InMemoryTTLCache(default_ttl_seconds=60, clock=clock),
        rate_limiter=InMemoryFixedWindowRateLimiter(max_requests=100, window_ms=60_000, clock=clock),
        products=InMemoryProductRepository(),
        product_types=InMemoryProductTypeRepository(),
        cleanup_interval_seconds=300,
    )


@pytest.fixture
def client(services: AppServices) -> TestClient:
    return TestClient(create_app(services))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": "Bearer test-admin-token"}

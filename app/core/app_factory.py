"""Application factory for the FastAPI app.

Centralizes app construction (metadata, lifespan, middleware, handlers,
routers) so tests can build isolated instances with their own services.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api.routes import health_router, product_types_router, products_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.lifecycle import AppServices
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations


def create_app(services: AppServices | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        services: Pre-built services (tests inject ones with fake clocks);
            built from settings when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app_services = services or AppServices.from_settings(settings.app)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await app_services.startup()
        try:
            yield
        finally:
            await app_services.shutdown()

    app = FastAPI(
        title="Stock Admin API",
        description=(
            "Inventory administration API: products and product types CRUD, "
            "search, filters and pagination. Listing responses are cached "
            "briefly in memory and every client IP is rate limited."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )
    app.state.services = app_services

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(products_router, prefix="/v1")
    app.include_router(product_types_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app

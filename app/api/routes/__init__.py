from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.product_types import router as product_types_router
from app.api.routes.products import router as products_router

__all__ = ["health_router", "product_types_router", "products_router"]

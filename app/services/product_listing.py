"""Paginated product listing backed by the response cache.

This is the cache's main consumer:
- Builds the cache key from the sanitized filters and pagination
- Returns the memoized page on hit
- On miss, queries the repository, embeds product types and caches the
  page with a shorter TTL when a free-text search is involved
"""

from __future__ import annotations

import logging
import math

from app.adapters.cache import AbstractCache, generate_key
from app.adapters.repositories import AbstractProductRepository, AbstractProductTypeRepository
from app.schemas.product import PaginatedProducts, Pagination, ProductFilters
from app.services.product_service import to_product_response

logger = logging.getLogger(__name__)

CACHE_PREFIX = "products"


def build_listing_cache_key(filters: ProductFilters, pagination: Pagination) -> str:
    """Cache key for one listing page; unset filters do not contribute."""

    return generate_key(
        CACHE_PREFIX,
        {
            "filters": filters.model_dump(exclude_none=True),
            "pagination": pagination.model_dump(),
        },
    )


class ProductListingService:
    """Serve product pages, memoizing each filter/pagination combination.

    Attributes:
        products: Product repository.
        product_types: Product type repository (for embedding).
        cache: Response cache shared with the mutating services.
        default_ttl_seconds: TTL for plain listings (None uses the cache default).
        search_ttl_seconds: TTL for listings with a free-text search term.
    """

    def __init__(
        self,
        products: AbstractProductRepository,
        product_types: AbstractProductTypeRepository,
        cache: AbstractCache,
        *,
        default_ttl_seconds: float | None = None,
        search_ttl_seconds: float = 30,
    ) -> None:
        self.products = products
        self.product_types = product_types
        self.cache = cache
        self.default_ttl_seconds = default_ttl_seconds
        self.search_ttl_seconds = search_ttl_seconds

    def _ttl_for(self, filters: ProductFilters) -> float | None:
        return self.search_ttl_seconds if filters.search else self.default_ttl_seconds

    def _load_page(self, filters: ProductFilters, pagination: Pagination) -> PaginatedProducts:
        rows, total = self.products.find_paginated(
            filters, page=pagination.page, page_size=pagination.page_size
        )
        types_by_id = self.product_types.find_by_ids(p.product_type_id for p in rows)

        for product in rows:
            if product.product_type_id not in types_by_id:
                logger.warning(
                    "product.orphan_type",
                    extra={"product_id": product.id, "product_type_id": product.product_type_id},
                )

        return PaginatedProducts(
            data=[to_product_response(p, types_by_id.get(p.product_type_id)) for p in rows],
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
            total_pages=math.ceil(total / pagination.page_size),
        )

    def list(
        self, filters: ProductFilters, pagination: Pagination
    ) -> tuple[PaginatedProducts, bool]:
        """Return one listing page and whether it came from the cache."""

        cache_key = build_listing_cache_key(filters, pagination)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return PaginatedProducts.model_validate(cached), True

        page = self._load_page(filters, pagination)
        self.cache.set(cache_key, page.model_dump(), self._ttl_for(filters))
        return page, False

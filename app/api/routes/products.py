from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.auth import require_admin
from app.core.config import settings
from app.core.lifecycle import AppServices, get_services
from app.core.rate_limit import enforce_rate_limit
from app.schemas.common import ApiResponse, MessageResponse
from app.schemas.product import (
    PaginatedProducts,
    Pagination,
    ProductCreate,
    ProductFilters,
    ProductResponse,
    ProductUpdate,
)
from app.services.product_listing import ProductListingService
from app.services.product_service import ProductService
from app.utils.query_params import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    sanitize_boolean,
    sanitize_number,
    sanitize_search_input,
    validate_pagination,
)

router = APIRouter(prefix="/products", tags=["Products"], dependencies=[Depends(require_admin)])


def get_product_service(services: AppServices = Depends(get_services)) -> ProductService:
    return ProductService(services.products, services.product_types, services.cache)


def get_listing_service(services: AppServices = Depends(get_services)) -> ProductListingService:
    return ProductListingService(
        services.products,
        services.product_types,
        services.cache,
        default_ttl_seconds=settings.app.cache_default_ttl_seconds,
        search_ttl_seconds=settings.app.cache_search_ttl_seconds,
    )


def parse_listing_query(
    page: Annotated[str | None, Query()] = None,
    page_size: Annotated[str | None, Query(alias="pageSize")] = None,
    search: Annotated[str | None, Query()] = None,
    code: Annotated[str | None, Query()] = None,
    description: Annotated[str | None, Query()] = None,
    product_type_id: Annotated[str | None, Query(alias="productTypeId")] = None,
    is_active: Annotated[str | None, Query(alias="isActive")] = None,
    include_deleted: Annotated[str | None, Query(alias="includeDeleted")] = None,
) -> tuple[ProductFilters, Pagination]:
    """Sanitize raw listing query parameters.

    Parameters are read as strings and cleaned rather than validated, so
    malformed values fall back to defaults instead of failing the request.
    """
    page_num, page_size_num = validate_pagination(
        sanitize_number(page, 1, None, 1),
        sanitize_number(page_size, 1, MAX_PAGE_SIZE, DEFAULT_PAGE_SIZE),
    )

    filters = ProductFilters(
        search=sanitize_search_input(search) or None,
        code=sanitize_number(code, 1),
        description=sanitize_search_input(description) or None,
        product_type_id=sanitize_number(product_type_id, 1),
        is_active=sanitize_boolean(is_active) if is_active else None,
        include_deleted=sanitize_boolean(include_deleted) if include_deleted else None,
    )
    return filters, Pagination(page=page_num, page_size=page_size_num)


@router.get(
    "",
    response_model=ApiResponse[PaginatedProducts],
    dependencies=[Depends(enforce_rate_limit)],
)
async def list_products(
    response: Response,
    query: tuple[ProductFilters, Pagination] = Depends(parse_listing_query),
    listing: ProductListingService = Depends(get_listing_service),
) -> ApiResponse[PaginatedProducts]:
    """List products with search, filters and pagination.

    Identical queries are answered from the response cache until it expires
    or any product/product type changes; ``X-Cache`` reports HIT or MISS.
    """
    filters, pagination = query
    page, cache_hit = listing.list(filters, pagination)
    response.headers["X-Cache"] = "HIT" if cache_hit else "MISS"
    return ApiResponse(data=page)


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_rate_limit)],
)
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    return ApiResponse(data=service.create(payload))


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(
    product_id: int,
    include_deleted: Annotated[str | None, Query(alias="includeDeleted")] = None,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    product = service.get(product_id, include_deleted=sanitize_boolean(include_deleted))
    return ApiResponse(data=product)


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    return ApiResponse(data=service.update(product_id, payload))


@router.delete("/{product_id}", response_model=ApiResponse[MessageResponse])
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[MessageResponse]:
    """Soft delete: the product is hidden from listings but can be restored."""
    service.soft_delete(product_id)
    return ApiResponse(data=MessageResponse(message="Product deleted successfully"))


@router.post("/{product_id}/restore", response_model=ApiResponse[ProductResponse])
async def restore_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    return ApiResponse(data=service.restore(product_id))


@router.delete("/{product_id}/hard-delete", response_model=ApiResponse[MessageResponse])
async def hard_delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[MessageResponse]:
    service.hard_delete(product_id)
    return ApiResponse(data=MessageResponse(message="Product permanently deleted"))

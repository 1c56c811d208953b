"""Pydantic schemas for product requests, filters and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_serializer

from app.schemas.common import CamelModel
from app.schemas.product_type import ProductTypeSummary
from app.utils.price import format_price


class ProductCreate(CamelModel):
    code: int = Field(..., ge=1, description="Unique product code.")
    description: str = Field(..., min_length=1)
    product_type_id: int = Field(..., ge=1)
    cost_price: float = Field(..., ge=0)
    public_price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    is_active: bool = True


class ProductUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""

    code: int | None = Field(None, ge=1)
    description: str | None = Field(None, min_length=1)
    product_type_id: int | None = Field(None, ge=1)
    cost_price: float | None = Field(None, ge=0)
    public_price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None


class ProductFilters(CamelModel):
    """Listing filters after query parameter sanitization.

    ``search`` matches the code exactly when it is numeric and the
    description (case-insensitive substring) otherwise. Explicit ``code``
    and ``description`` filters take precedence over ``search``.
    """

    search: str | None = None
    code: int | None = None
    description: str | None = None
    product_type_id: int | None = None
    is_active: bool | None = None
    include_deleted: bool | None = None


class Pagination(CamelModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


class ProductResponse(CamelModel):
    id: int
    code: int
    description: str
    product_type_id: int
    product_type: ProductTypeSummary | None = None
    cost_price: float
    public_price: float
    stock: int
    is_active: bool
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("cost_price", "public_price", when_used="json")
    def _format_prices(self, value: float) -> str:
        return format_price(value)


class PaginatedProducts(CamelModel):
    data: list[ProductResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

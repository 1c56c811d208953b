"""Pydantic schemas for product type requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel


class ProductTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ProductTypeUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None


class ProductTypeSummary(CamelModel):
    """Product type as embedded in product payloads."""

    id: int
    name: str
    description: str | None = None


class ProductTypeResponse(ProductTypeSummary):
    created_at: datetime
    updated_at: datetime

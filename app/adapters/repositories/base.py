"""Repository interfaces and the entities they return."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from app.schemas.product import ProductCreate, ProductFilters, ProductUpdate
from app.schemas.product_type import ProductTypeCreate, ProductTypeUpdate


@dataclass
class ProductType:
    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime


@dataclass
class Product:
    id: int
    code: int
    description: str
    product_type_id: int
    cost_price: float
    public_price: float
    stock: int
    is_active: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime


class AbstractProductRepository(ABC):
    """Storage for products. Soft-deleted rows are hidden unless asked for."""

    @abstractmethod
    def find_paginated(
        self, filters: ProductFilters, *, page: int, page_size: int
    ) -> tuple[list[Product], int]:
        """Return one page of matching products (ordered by code) and the total match count."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, product_id: int, *, include_deleted: bool = False) -> Product | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_code(self, code: int, *, include_deleted: bool = False) -> Product | None:
        raise NotImplementedError

    @abstractmethod
    def count_by_type(self, product_type_id: int) -> int:
        """Count products (deleted included) referencing a product type."""
        raise NotImplementedError

    @abstractmethod
    def create(self, data: ProductCreate) -> Product:
        raise NotImplementedError

    @abstractmethod
    def update(self, product_id: int, data: ProductUpdate) -> Product:
        raise NotImplementedError

    @abstractmethod
    def soft_delete(self, product_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def restore(self, product_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def hard_delete(self, product_id: int) -> None:
        raise NotImplementedError


class AbstractProductTypeRepository(ABC):
    """Storage for product types, ordered by name."""

    @abstractmethod
    def find_all(self) -> list[ProductType]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, product_type_id: int) -> ProductType | None:
        raise NotImplementedError

    @abstractmethod
    def find_by_ids(self, ids: Iterable[int]) -> dict[int, ProductType]:
        raise NotImplementedError

    @abstractmethod
    def find_by_name(self, name: str) -> ProductType | None:
        raise NotImplementedError

    @abstractmethod
    def create(self, data: ProductTypeCreate) -> ProductType:
        raise NotImplementedError

    @abstractmethod
    def update(self, product_type_id: int, data: ProductTypeUpdate) -> ProductType:
        raise NotImplementedError

    @abstractmethod
    def delete(self, product_type_id: int) -> None:
        raise NotImplementedError

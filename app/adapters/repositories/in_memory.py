"""Dictionary-backed repositories.

Rows are copied in and out so callers never share state with the store.
Ids are assigned from a per-repository counter starting at 1.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable

from app.adapters.repositories.base import (
    AbstractProductRepository,
    AbstractProductTypeRepository,
    Product,
    ProductType,
)
from app.schemas.product import ProductCreate, ProductFilters, ProductUpdate
from app.schemas.product_type import ProductTypeCreate, ProductTypeUpdate
from app.utils.query_params import parse_leading_int


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _matches(product: Product, filters: ProductFilters) -> bool:
    code = filters.code
    description = filters.description

    if filters.search:
        term = filters.search.strip()
        search_code = parse_leading_int(term)
        if search_code is not None:
            if code is None:
                code = search_code
        elif description is None:
            description = term

    if code is not None and product.code != code:
        return False
    if description and description.lower() not in product.description.lower():
        return False
    if filters.product_type_id and product.product_type_id != filters.product_type_id:
        return False
    if filters.is_active is not None and product.is_active != filters.is_active:
        return False
    if not filters.include_deleted and product.deleted_at is not None:
        return False
    return True


class InMemoryProductRepository(AbstractProductRepository):
    def __init__(self) -> None:
        self._rows: dict[int, Product] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def _get(self, product_id: int) -> Product:
        try:
            return self._rows[product_id]
        except KeyError:
            raise LookupError(f"product {product_id} does not exist") from None

    def find_paginated(
        self, filters: ProductFilters, *, page: int, page_size: int
    ) -> tuple[list[Product], int]:
        with self._lock:
            matching = sorted(
                (p for p in self._rows.values() if _matches(p, filters)),
                key=lambda p: p.code,
            )
        offset = (page - 1) * page_size
        return [replace(p) for p in matching[offset:offset + page_size]], len(matching)

    def find_by_id(self, product_id: int, *, include_deleted: bool = False) -> Product | None:
        with self._lock:
            product = self._rows.get(product_id)
            if product is None or (product.deleted_at and not include_deleted):
                return None
            return replace(product)

    def find_by_code(self, code: int, *, include_deleted: bool = False) -> Product | None:
        with self._lock:
            for product in self._rows.values():
                if product.code != code:
                    continue
                if product.deleted_at and not include_deleted:
                    continue
                return replace(product)
        return None

    def count_by_type(self, product_type_id: int) -> int:
        with self._lock:
            return sum(1 for p in self._rows.values() if p.product_type_id == product_type_id)

    def create(self, data: ProductCreate) -> Product:
        now = _utcnow()
        with self._lock:
            product = Product(
                id=next(self._ids),
                code=data.code,
                description=data.description,
                product_type_id=data.product_type_id,
                cost_price=data.cost_price,
                public_price=data.public_price,
                stock=data.stock,
                is_active=data.is_active,
                deleted_at=None,
                created_at=now,
                updated_at=now,
            )
            self._rows[product.id] = product
            return replace(product)

    def update(self, product_id: int, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        with self._lock:
            updated = replace(self._get(product_id), **changes, updated_at=_utcnow())
            self._rows[product_id] = updated
            return replace(updated)

    def soft_delete(self, product_id: int) -> None:
        with self._lock:
            now = _utcnow()
            self._rows[product_id] = replace(self._get(product_id), deleted_at=now, updated_at=now)

    def restore(self, product_id: int) -> None:
        with self._lock:
            self._rows[product_id] = replace(
                self._get(product_id), deleted_at=None, updated_at=_utcnow()
            )

    def hard_delete(self, product_id: int) -> None:
        with self._lock:
            self._get(product_id)
            del self._rows[product_id]


class InMemoryProductTypeRepository(AbstractProductTypeRepository):
    def __init__(self) -> None:
        self._rows: dict[int, ProductType] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def _get(self, product_type_id: int) -> ProductType:
        try:
            return self._rows[product_type_id]
        except KeyError:
            raise LookupError(f"product type {product_type_id} does not exist") from None

    def find_all(self) -> list[ProductType]:
        with self._lock:
            return [replace(pt) for pt in sorted(self._rows.values(), key=lambda pt: pt.name)]

    def find_by_id(self, product_type_id: int) -> ProductType | None:
        with self._lock:
            product_type = self._rows.get(product_type_id)
            return replace(product_type) if product_type else None

    def find_by_ids(self, ids: Iterable[int]) -> dict[int, ProductType]:
        with self._lock:
            return {i: replace(self._rows[i]) for i in set(ids) if i in self._rows}

    def find_by_name(self, name: str) -> ProductType | None:
        with self._lock:
            for product_type in self._rows.values():
                if product_type.name == name:
                    return replace(product_type)
        return None

    def create(self, data: ProductTypeCreate) -> ProductType:
        now = _utcnow()
        with self._lock:
            product_type = ProductType(
                id=next(self._ids),
                name=data.name,
                description=data.description,
                created_at=now,
                updated_at=now,
            )
            self._rows[product_type.id] = product_type
            return replace(product_type)

    def update(self, product_type_id: int, data: ProductTypeUpdate) -> ProductType:
        changes = data.model_dump(exclude_unset=True)
        if not changes.get("name"):
            changes.pop("name", None)
        with self._lock:
            updated = replace(self._get(product_type_id), **changes, updated_at=_utcnow())
            self._rows[product_type_id] = updated
            return replace(updated)

    def delete(self, product_type_id: int) -> None:
        with self._lock:
            self._get(product_type_id)
            del self._rows[product_type_id]

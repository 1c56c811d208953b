"""Product type use cases."""

from __future__ import annotations

import logging

from app.adapters.cache import AbstractCache
from app.adapters.repositories import (
    AbstractProductRepository,
    AbstractProductTypeRepository,
    ProductType,
)
from app.core.errors import ConflictAppError, NotFoundAppError
from app.schemas.product_type import ProductTypeCreate, ProductTypeResponse, ProductTypeUpdate

logger = logging.getLogger(__name__)


def to_product_type_response(product_type: ProductType) -> ProductTypeResponse:
    return ProductTypeResponse.model_validate(product_type)


class ProductTypeService:
    """CRUD over product types.

    Product types are embedded in cached product listings, so every
    mutation clears the listing cache.
    """

    def __init__(
        self,
        product_types: AbstractProductTypeRepository,
        products: AbstractProductRepository,
        cache: AbstractCache,
    ) -> None:
        self.product_types = product_types
        self.products = products
        self.cache = cache

    def _require(self, product_type_id: int) -> ProductType:
        product_type = self.product_types.find_by_id(product_type_id)
        if product_type is None:
            raise NotFoundAppError(
                code="product_type_not_found",
                message="Product type not found",
                details={"id": product_type_id},
            )
        return product_type

    def _ensure_name_available(self, name: str) -> None:
        if self.product_types.find_by_name(name) is not None:
            raise ConflictAppError(
                code="product_type_name_taken",
                message="Product type with this name already exists",
                details={"name": name},
            )

    def list(self) -> list[ProductTypeResponse]:
        return [to_product_type_response(pt) for pt in self.product_types.find_all()]

    def get(self, product_type_id: int) -> ProductTypeResponse:
        return to_product_type_response(self._require(product_type_id))

    def create(self, data: ProductTypeCreate) -> ProductTypeResponse:
        self._ensure_name_available(data.name)
        product_type = self.product_types.create(data)
        self.cache.clear()
        logger.info("product_type.created", extra={"product_type_id": product_type.id})
        return to_product_type_response(product_type)

    def update(self, product_type_id: int, data: ProductTypeUpdate) -> ProductTypeResponse:
        existing = self._require(product_type_id)
        if data.name and data.name != existing.name:
            self._ensure_name_available(data.name)

        product_type = self.product_types.update(product_type_id, data)
        self.cache.clear()
        logger.info("product_type.updated", extra={"product_type_id": product_type_id})
        return to_product_type_response(product_type)

    def delete(self, product_type_id: int) -> None:
        self._require(product_type_id)
        in_use = self.products.count_by_type(product_type_id)
        if in_use:
            raise ConflictAppError(
                code="product_type_in_use",
                message="Product type is still assigned to products",
                details={"id": product_type_id, "context": {"products": in_use}},
            )

        self.product_types.delete(product_type_id)
        self.cache.clear()
        logger.info("product_type.deleted", extra={"product_type_id": product_type_id})

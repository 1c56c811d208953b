"""Product use cases: CRUD, soft delete, restore and permanent delete."""

from __future__ import annotations

import logging

from app.adapters.cache import AbstractCache
from app.adapters.repositories import (
    AbstractProductRepository,
    AbstractProductTypeRepository,
    Product,
    ProductType,
)
from app.core.errors import ConflictAppError, NotFoundAppError, ValidationAppError
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.schemas.product_type import ProductTypeSummary

logger = logging.getLogger(__name__)


def to_product_response(product: Product, product_type: ProductType | None) -> ProductResponse:
    """Build the API representation of a product with its type embedded when known."""

    response = ProductResponse.model_validate(product)
    if product_type is not None:
        response.product_type = ProductTypeSummary.model_validate(product_type)
    return response


def _not_found(product_id: int) -> NotFoundAppError:
    return NotFoundAppError(
        code="product_not_found",
        message="Product not found",
        details={"id": product_id},
    )


class ProductService:
    """Single-product operations.

    Every successful mutation clears the listing cache: listing keys are
    derived from arbitrary filter/pagination combinations, so the affected
    keys cannot be enumerated.
    """

    def __init__(
        self,
        products: AbstractProductRepository,
        product_types: AbstractProductTypeRepository,
        cache: AbstractCache,
    ) -> None:
        self.products = products
        self.product_types = product_types
        self.cache = cache

    def _with_type(self, product: Product) -> ProductResponse:
        return to_product_response(product, self.product_types.find_by_id(product.product_type_id))

    def _ensure_code_available(self, code: int) -> None:
        if self.products.find_by_code(code) is not None:
            raise ConflictAppError(
                code="product_code_taken",
                message="Product with this code already exists",
                details={"code": code},
            )

    def _ensure_type_exists(self, product_type_id: int) -> None:
        if self.product_types.find_by_id(product_type_id) is None:
            raise ValidationAppError(
                code="unknown_product_type",
                message="Product type does not exist",
                details={"id": product_type_id},
            )

    def get(self, product_id: int, *, include_deleted: bool = False) -> ProductResponse:
        product = self.products.find_by_id(product_id, include_deleted=include_deleted)
        if product is None:
            raise _not_found(product_id)
        return self._with_type(product)

    def create(self, data: ProductCreate) -> ProductResponse:
        self._ensure_code_available(data.code)
        self._ensure_type_exists(data.product_type_id)

        product = self.products.create(data)
        self.cache.clear()
        logger.info("product.created", extra={"product_id": product.id, "code": product.code})
        return self._with_type(product)

    def update(self, product_id: int, data: ProductUpdate) -> ProductResponse:
        existing = self.products.find_by_id(product_id)
        if existing is None:
            raise _not_found(product_id)
        if data.code and data.code != existing.code:
            self._ensure_code_available(data.code)
        if data.product_type_id:
            self._ensure_type_exists(data.product_type_id)

        product = self.products.update(product_id, data)
        self.cache.clear()
        logger.info("product.updated", extra={"product_id": product_id})
        return self._with_type(product)

    def soft_delete(self, product_id: int) -> None:
        # Looked up with deleted rows included so a repeated delete is a
        # conflict rather than a 404.
        existing = self.products.find_by_id(product_id, include_deleted=True)
        if existing is None:
            raise _not_found(product_id)
        if existing.deleted_at is not None:
            raise ConflictAppError(
                code="product_already_deleted",
                message="Product is already deleted",
                details={"id": product_id},
            )

        self.products.soft_delete(product_id)
        self.cache.clear()
        logger.info("product.soft_deleted", extra={"product_id": product_id})

    def restore(self, product_id: int) -> ProductResponse:
        existing = self.products.find_by_id(product_id, include_deleted=True)
        if existing is None:
            raise _not_found(product_id)
        if existing.deleted_at is None:
            raise ConflictAppError(
                code="product_not_deleted",
                message="Product is not deleted",
                details={"id": product_id},
            )

        self._ensure_code_available(existing.code)

        self.products.restore(product_id)
        self.cache.clear()
        logger.info("product.restored", extra={"product_id": product_id})
        return self.get(product_id)

    def hard_delete(self, product_id: int) -> None:
        if self.products.find_by_id(product_id, include_deleted=True) is None:
            raise _not_found(product_id)

        self.products.hard_delete(product_id)
        self.cache.clear()
        logger.info("product.hard_deleted", extra={"product_id": product_id})

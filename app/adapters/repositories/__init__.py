"""Persistence adapters for products and product types.

Services depend on the abstract repositories; the in-memory
implementations keep the API self-contained and are what the tests use.
"""

from app.adapters.repositories.base import (
    AbstractProductRepository,
    AbstractProductTypeRepository,
    Product,
    ProductType,
)
from app.adapters.repositories.in_memory import (
    InMemoryProductRepository,
    InMemoryProductTypeRepository,
)

__all__ = [
    "AbstractProductRepository",
    "AbstractProductTypeRepository",
    "InMemoryProductRepository",
    "InMemoryProductTypeRepository",
    "Product",
    "ProductType",
]

"""Tests for deterministic cache key construction."""

from app.adapters.cache import InMemoryTTLCache, generate_key
from app.schemas.product import Pagination, ProductFilters
from app.services.product_listing import build_listing_cache_key


def test_key_is_independent_of_insertion_order() -> None:
    assert generate_key("products", {"b": 2, "a": 1}) == generate_key("products", {"a": 1, "b": 2})


def test_key_changes_with_values() -> None:
    assert generate_key("products", {"a": 1}) != generate_key("products", {"a": 2})


def test_key_format() -> None:
    assert generate_key("products", {"b": "x", "a": 1}) == 'products:a:1|b:"x"'
    assert generate_key("products", {}) == "products:"


def test_nested_mappings_are_order_independent() -> None:
    first = generate_key("products", {"filters": {"search": "tea", "code": 3}})
    second = generate_key("products", {"filters": {"code": 3, "search": "tea"}})

    assert first == second
    assert first == 'products:filters:{"code":3,"search":"tea"}'


def test_prefix_partitions_keys() -> None:
    assert generate_key("products", {"a": 1}) != generate_key("product-types", {"a": 1})


def test_key_helper_is_exposed_on_cache_class() -> None:
    assert InMemoryTTLCache.generate_key("p", {"a": None}) == "p:a:null"


def test_listing_key_ignores_unset_filters() -> None:
    pagination = Pagination(page=1, page_size=10)

    plain = build_listing_cache_key(ProductFilters(), pagination)
    explicit_none = build_listing_cache_key(ProductFilters(search=None), pagination)
    searched = build_listing_cache_key(ProductFilters(search="tea"), pagination)

    assert plain == explicit_none
    assert plain != searched
    assert plain.startswith("products:")


def test_listing_key_differs_by_page() -> None:
    filters = ProductFilters(is_active=True)

    assert build_listing_cache_key(filters, Pagination(page=1)) != build_listing_cache_key(
        filters, Pagination(page=2)
    )

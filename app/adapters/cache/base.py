"""Cache interface and key construction."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Mapping

KEY_PAIR_SEPARATOR = "|"


def _serialize(value: Any) -> str:
    # Compact JSON with sorted keys so nested mappings are order independent too
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def generate_key(prefix: str, params: Mapping[str, Any]) -> str:
    """Build a deterministic cache key from a prefix and a parameter mapping.

    Keys are sorted before serialization, so two mappings with the same
    items produce the same key regardless of insertion order.

    Args:
        prefix: Namespace of the cached resource (e.g. ``"products"``).
        params: Flat or nested parameters identifying the cached result.

    Returns:
        Key of the form ``prefix:k1:<json>|k2:<json>``.

    Examples:
        >>> generate_key("products", {"b": 2, "a": 1})
        'products:a:1|b:2'
        >>> generate_key("products", {"page": {"size": 10, "n": 1}})
        'products:page:{"n":1,"size":10}'
    """

    pairs = KEY_PAIR_SEPARATOR.join(
        f"{name}:{_serialize(params[name])}" for name in sorted(params)
    )
    return f"{prefix}:{pairs}"


class AbstractCache(ABC):
    """Interface for key/value caches with per-entry expiry."""

    generate_key = staticmethod(generate_key)

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the live value stored under key, or None."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        """Store value under key, replacing any previous entry."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def cleanup(self) -> int:
        """Drop expired entries and return how many were removed."""
        raise NotImplementedError

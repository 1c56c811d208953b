"""Response caching adapters.

The listing service depends on ``AbstractCache`` only, so the in-process
store can later be replaced by a shared one without touching callers.
"""

from app.adapters.cache.base import AbstractCache, generate_key
from app.adapters.cache.in_memory import InMemoryTTLCache

__all__ = ["AbstractCache", "InMemoryTTLCache", "generate_key"]

"""Query cache with explicit invalidation."""

from hypercyber.cache.query_cache import QueryCache, QueryKey

__all__ = ["QueryCache", "QueryKey"]

"""Query cache keyed by resource kind and filters.

Every list the views display lives here under a ``QueryKey``. Mutations
invalidate by kind after success; the next read re-requests the list.

Responses are fenced: each fetch takes a sequence number, and only the
response to the most recent request for a key (issued after the key's
last invalidation) is stored. A slow response to a superseded request is
returned to its caller but never overwrites newer data.
"""

import itertools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from hypercyber.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# =============================================================================
# KEYS
# =============================================================================


@dataclass(frozen=True)
class QueryKey:
    """Structured cache key.

    Attributes:
        kind: Resource collection (e.g. ``rgpd-requests``).
        filters: Sorted ``(name, value)`` pairs; unset filters are absent.
    """

    kind: str
    filters: tuple[tuple[str, str], ...] = ()

    @classmethod
    def of(cls, kind: str, **filters: str | None) -> "QueryKey":
        """Build a key, dropping None/empty filters."""
        pairs = tuple(sorted((k, str(v)) for k, v in filters.items() if v))
        return cls(kind=kind, filters=pairs)

    def matches(self, kind: str, **filters: str | None) -> bool:
        """Prefix match: same kind and every given filter equal."""
        if self.kind != kind:
            return False
        own = dict(self.filters)
        return all(own.get(k) == str(v) for k, v in filters.items() if v)

    def __str__(self) -> str:
        if not self.filters:
            return self.kind
        rendered = ",".join(f"{k}={v}" for k, v in self.filters)
        return f"{self.kind}[{rendered}]"


@dataclass
class _Entry:
    data: Any
    sequence: int


@dataclass
class QueryCache:
    """In-memory cache with invalidation and request fencing."""

    _entries: dict[QueryKey, _Entry] = field(default_factory=dict)
    _latest: dict[QueryKey, int] = field(default_factory=dict)
    _sequence: itertools.count = field(default_factory=lambda: itertools.count(1))

    def get(self, key: QueryKey) -> Any | None:
        entry = self._entries.get(key)
        return entry.data if entry else None

    async def fetch(
        self,
        key: QueryKey,
        loader: Callable[[], Awaitable[T]],
        force: bool = False,
    ) -> T:
        """Return cached data for ``key`` or load it.

        Args:
            key: Cache key.
            loader: Coroutine factory performing the request.
            force: Bypass the cached value.

        Returns:
            Loaded (or cached) data. Loader errors propagate and leave the
            cache unchanged.
        """
        if not force and key in self._entries:
            return self._entries[key].data

        sequence = next(self._sequence)
        self._latest[key] = sequence

        data = await loader()

        if self._latest.get(key) != sequence:
            logger.debug("stale_response_discarded", key=str(key), sequence=sequence)
            return data

        self._entries[key] = _Entry(data=data, sequence=sequence)
        return data

    def set(self, key: QueryKey, data: Any) -> None:
        """Store data directly, superseding any in-flight request."""
        sequence = next(self._sequence)
        self._latest[key] = sequence
        self._entries[key] = _Entry(data=data, sequence=sequence)

    def invalidate(self, kind: str, **filters: str | None) -> int:
        """Drop every key of ``kind`` matching ``filters``.

        In-flight requests for those keys are fenced off as well.

        Returns:
            Number of cached entries removed.
        """
        stale = [k for k in self._entries if k.matches(kind, **filters)]
        for key in stale:
            del self._entries[key]
        for key in [k for k in self._latest if k.matches(kind, **filters)]:
            self._latest[key] = next(self._sequence)
        logger.debug("cache_invalidated", kind=kind, removed=len(stale))
        return len(stale)

    def clear(self) -> None:
        """Forget everything (logout, full reload)."""
        self._entries.clear()
        for key in self._latest:
            self._latest[key] = next(self._sequence)

"""Bounded in-memory LRU cache with a fixed time-to-live.

Stores raw provider responses (status, headers, body bytes), never parsed
domain objects, so a cached entry is parsed again on every hit.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

# Headers that describe the wire encoding of the original body. The cached body is already
# decoded, so replaying them would make httpx try to decode it a second time.
_WIRE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


@dataclass
class CacheEntry[V]:
    """Cache entry with value and metadata."""

    value: V
    created_at: float
    ttl_seconds: float

    def is_expired(self, now: float) -> bool:
        """Check if cache entry is expired at ``now``."""
        return now > (self.created_at + self.ttl_seconds)


@dataclass(frozen=True)
class CachedResponse:
    """Everything needed to rebuild an ``httpx.Response`` without the network."""

    status_code: int
    headers: tuple[tuple[str, str], ...]
    content: bytes
    extensions: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CachedResponse":
        """Snapshot a response whose body has already been read."""
        headers = tuple(
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _WIRE_HEADERS
        )
        extensions = {}
        reason = response.extensions.get("reason_phrase")
        if reason:
            extensions["reason_phrase"] = reason
        return cls(
            status_code=response.status_code,
            headers=headers,
            content=response.content,
            extensions=extensions,
        )

    def to_response(self, request: httpx.Request) -> httpx.Response:
        """Build a fresh response bound to ``request``."""
        return httpx.Response(
            status_code=self.status_code,
            headers=list(self.headers),
            content=self.content,
            request=request,
            extensions=dict(self.extensions),
        )


class BaseCache[K, V](ABC):
    """Base cache interface for all cache implementations."""

    @abstractmethod
    async def get(self, key: K) -> V | None:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: K, value: V) -> None:
        """Set value in cache, replacing any existing entry."""
        pass


class ResponseCache(BaseCache[str, CachedResponse]):
    """LRU map of request key -> CachedResponse with one TTL for every entry.

    Defaults match the transport defaults: 100 entries, 5 minutes.
    """

    # Hey future me, the _lock guards the OrderedDict because get() MUTATES it (move_to_end for
    # LRU order, delete on expiry). Two coroutines interleaving on the same key without it can
    # evict an entry another one is about to return. Eviction is strict LRU once max_entries is
    # reached, expiry is checked lazily on read. The clock is injectable so tests don't sleep.
    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[CachedResponse]] = OrderedDict()
        self._lock = asyncio.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(request: httpx.Request) -> str:
        """Cache key of a request: method, full URL (query included) and Accept header."""
        accept = request.headers.get("accept", "")
        return f"{request.method} {request.url} {accept}"

    async def get(self, key: str) -> CachedResponse | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self.misses += 1
                return None

            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    async def set(self, key: str, value: CachedResponse) -> None:
        async with self._lock:
            self._entries[key] = CacheEntry(
                value=value, created_at=self._clock(), ttl_seconds=self.ttl_seconds
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    # Not locked, stats are for debugging only
    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with entry count, capacity and hit/miss counters
        """
        return {
            "total_entries": len(self._entries),
            "max_entries": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
        }

    def __len__(self) -> int:
        return len(self._entries)

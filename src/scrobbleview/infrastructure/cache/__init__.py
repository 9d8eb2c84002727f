"""HTTP response cache used by the caching transport."""

from .response_cache import BaseCache, CachedResponse, CacheEntry, ResponseCache

__all__ = ["BaseCache", "CacheEntry", "CachedResponse", "ResponseCache"]

"""Application cache – cache keys, cache-aside policy and the search result cache port."""
from catalog_search.application.cache.aside import CacheAsidePolicy
from catalog_search.application.cache.keys import CacheKey
from catalog_search.application.cache.store import InMemorySearchResultCache, SearchResultCache

__all__ = ["CacheAsidePolicy", "CacheKey", "InMemorySearchResultCache", "SearchResultCache"]

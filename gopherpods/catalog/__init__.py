"""Catalog reads: repository, read-through cache and sort orders."""

from .cache import CACHE_KEY, CacheBackend, CatalogCache, InMemoryCache
from .ordering import DEFAULT_ORDER, parse_order, sort_episodes
from .repository import EpisodeRepository

__all__ = [
    "CACHE_KEY",
    "CacheBackend",
    "CatalogCache",
    "InMemoryCache",
    "DEFAULT_ORDER",
    "parse_order",
    "sort_episodes",
    "EpisodeRepository",
]

"""Read-through cache in front of the catalog's full episode scan."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Tuple

from ..models.episode import Episode
from ..utils.logging import get_logger, log_with_context
from .repository import EpisodeRepository


logger = get_logger("CatalogCache")

CACHE_KEY = "podcasts"


class CacheBackend(ABC):
    """Minimal key/value cache capability. Backends report failures as CacheError."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss or expiry."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value for at most ``ttl_seconds``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Drop a key; deleting a missing key is not an error."""


class InMemoryCache(CacheBackend):
    """
    Process-local cache with per-entry expiry.

    Entries are stored with their expiry deadline and evicted lazily when
    read after it has passed.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)


class CatalogCache:
    """
    Single-entry read-through cache of the newest-first episode list.

    Store failures propagate to the caller. Cache backend failures are
    logged and bypassed, so a broken cache degrades to reading the store.
    Concurrent misses may each scan and overwrite the entry; every fill is
    equivalent for the same store state.
    """

    def __init__(
        self,
        repository: EpisodeRepository,
        backend: CacheBackend,
        ttl_seconds: int,
        cache_key: str = CACHE_KEY,
    ):
        self.repository = repository
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.cache_key = cache_key

    def get(self) -> Sequence[Episode]:
        """Return all episodes ordered by ``episode_date`` descending."""
        cached = self._read_backend()
        if cached is not None:
            return cached

        start_time = time.time()
        episodes = tuple(self.repository.list_newest_first())
        log_with_context(
            logger,
            logging.INFO,
            "Catalog cache filled from store",
            context={"episode_count": len(episodes)},
            execution_time_ms=(time.time() - start_time) * 1000,
        )

        try:
            self.backend.set(self.cache_key, episodes, self.ttl_seconds)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                "Cache set failed",
                context={"cache_key": self.cache_key, "error": str(e)},
            )

        return episodes

    def invalidate(self) -> None:
        """Drop the cached list. Call after every write that changes the catalog."""
        try:
            self.backend.delete(self.cache_key)
            logger.info("Catalog cache invalidated")
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                "Cache delete failed, next read may be stale",
                context={"cache_key": self.cache_key, "error": str(e)},
            )

    def _read_backend(self) -> Optional[Sequence[Episode]]:
        try:
            return self.backend.get(self.cache_key)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                "Cache get failed, reading store directly",
                context={"cache_key": self.cache_key, "error": str(e)},
            )
            return None

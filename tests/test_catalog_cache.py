"""
Unit tests for the catalog read-through cache and catalog ordering.

Cache backend failures must never fail a read; store failures must.
"""

from datetime import date, datetime, timezone
from unittest.mock import Mock

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gopherpods.catalog import (
    CACHE_KEY,
    CatalogCache,
    EpisodeRepository,
    InMemoryCache,
    parse_order,
    sort_episodes,
)
from gopherpods.errors import CacheError, StoreError
from gopherpods.models.episode import Episode
from gopherpods.storage import InMemoryStore


def make_episode(episode_id: int, day: date, show: str = "Go Time", title: str = "Ep") -> Episode:
    return Episode(
        id=episode_id,
        show=show,
        title=title,
        description="",
        episode_url=f"https://example.com/{episode_id}",
        episode_date=day,
        added_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
    )


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestInMemoryCache:
    """Test the TTL cache backend."""

    def test_hit_before_expiry(self):
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        cache.set("k", ("v",), ttl_seconds=10)

        clock.now = 9.9

        assert cache.get("k") == ("v",)

    def test_miss_after_expiry(self):
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        cache.set("k", ("v",), ttl_seconds=10)

        clock.now = 10

        assert cache.get("k") is None

    def test_delete_missing_key(self):
        InMemoryCache().delete("nothing")


class TestCatalogCache:
    """Test read-through filling and invalidation."""

    @pytest.fixture
    def store(self):
        return InMemoryStore()

    @pytest.fixture
    def repository(self, store):
        return EpisodeRepository(store)

    def test_miss_fills_newest_first(self, repository):
        repository.add(make_episode(1, date(2024, 1, 1)))
        repository.add(make_episode(2, date(2024, 3, 1)))
        repository.add(make_episode(3, date(2024, 2, 1)))
        backend = InMemoryCache()
        cache = CatalogCache(repository, backend, ttl_seconds=60)

        episodes = cache.get()

        assert [ep.id for ep in episodes] == [2, 3, 1]
        assert backend.get(CACHE_KEY) == episodes

    def test_hit_skips_store(self):
        repository = Mock(spec=EpisodeRepository)
        repository.list_newest_first.return_value = [make_episode(1, date(2024, 1, 1))]
        cache = CatalogCache(repository, InMemoryCache(), ttl_seconds=60)

        first = cache.get()
        second = cache.get()

        assert first == second
        repository.list_newest_first.assert_called_once()

    def test_empty_catalog_is_cached(self):
        repository = Mock(spec=EpisodeRepository)
        repository.list_newest_first.return_value = []
        cache = CatalogCache(repository, InMemoryCache(), ttl_seconds=60)

        assert cache.get() == ()
        assert cache.get() == ()
        repository.list_newest_first.assert_called_once()

    def test_invalidate_forces_rescan(self, repository):
        cache = CatalogCache(repository, InMemoryCache(), ttl_seconds=60)
        assert cache.get() == ()

        repository.add(make_episode(1, date(2024, 1, 1)))
        assert cache.get() == ()

        cache.invalidate()

        assert [ep.id for ep in cache.get()] == [1]

    def test_backend_get_failure_falls_back_to_store(self, repository):
        repository.add(make_episode(1, date(2024, 1, 1)))
        backend = Mock()
        backend.get.side_effect = CacheError("cache down")
        cache = CatalogCache(repository, backend, ttl_seconds=60)

        assert [ep.id for ep in cache.get()] == [1]

    def test_backend_set_failure_is_swallowed(self, repository):
        repository.add(make_episode(1, date(2024, 1, 1)))
        backend = Mock()
        backend.get.return_value = None
        backend.set.side_effect = ConnectionError("cache down")
        cache = CatalogCache(repository, backend, ttl_seconds=60)

        assert [ep.id for ep in cache.get()] == [1]
        backend.set.assert_called_once()

    def test_invalidate_failure_is_swallowed(self, repository):
        backend = Mock()
        backend.delete.side_effect = CacheError("cache down")
        cache = CatalogCache(repository, backend, ttl_seconds=60)

        cache.invalidate()

        backend.delete.assert_called_once_with(CACHE_KEY)

    def test_store_failure_propagates(self):
        repository = Mock(spec=EpisodeRepository)
        repository.list_newest_first.side_effect = StoreError("query failed")
        backend = InMemoryCache()
        cache = CatalogCache(repository, backend, ttl_seconds=60)

        with pytest.raises(StoreError):
            cache.get()

        assert backend.get(CACHE_KEY) is None


class TestOrdering:
    """Test the catalog page sort orders."""

    @pytest.mark.parametrize("value,expected", [
        ("", "-episode_date"),
        ("date", "-episode_date"),
        ("title", "title"),
        ("show", "show"),
        ("SHOW", "show"),
        ("bogus", "-episode_date"),
    ])
    def test_parse_order(self, value, expected):
        assert parse_order(value) == expected

    def test_sort_by_show_is_case_insensitive(self):
        episodes = [
            make_episode(1, date(2024, 1, 1), show="go time"),
            make_episode(2, date(2024, 1, 2), show="Changelog"),
        ]

        assert [ep.id for ep in sort_episodes(episodes, "show")] == [2, 1]

    @settings(max_examples=100, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(st.lists(st.dates(min_value=date(2015, 1, 1), max_value=date(2030, 12, 31)), max_size=30))
    def test_catalog_reads_newest_first(self, days):
        repository = EpisodeRepository(InMemoryStore())
        for index, day in enumerate(days, start=1):
            repository.add(make_episode(index, day))
        cache = CatalogCache(repository, InMemoryCache(), ttl_seconds=60)

        result = [ep.episode_date for ep in cache.get()]

        assert result == sorted(days, reverse=True)

"""
Tests for feed synthesis and RSS output.

Generated documents are read back with feedparser.
"""

from datetime import date, datetime, timezone
from unittest.mock import patch

import feedparser
import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from gopherpods.config import FeedConfig
from gopherpods.feed import (
    AUDIO_MIME_TYPE,
    LINK_TO_MEDIA,
    render_rss,
    synthesize,
)
from gopherpods.models.episode import Episode


FEED = FeedConfig(
    title="GopherPods",
    link="https://gopherpods.example.com",
    description="Podcasts about Go (golang)",
    image_url="https://gopherpods.example.com/gopher.png",
)

NOW = datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc)


def make_episode(episode_id, day=date(2024, 1, 2), **overrides):
    values = dict(
        id=episode_id,
        show="Go Time",
        title=f"Episode {episode_id}",
        description="Talking about Go",
        episode_url=f"https://example.com/ep{episode_id}",
        episode_date=day,
        added_at=datetime(2024, 1, 5, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Episode(**values)


@st.composite
def episode_strategy(draw):
    episode_id = draw(st.integers(min_value=1, max_value=10**6))
    return make_episode(
        episode_id,
        day=draw(st.dates(min_value=date(2012, 1, 1), max_value=date(2030, 12, 31))),
        title=draw(st.text(max_size=20)),
        media_url=draw(st.one_of(st.none(), st.just(f"https://cdn.example.com/{episode_id}.mp3"))),
        size_bytes=draw(st.one_of(st.none(), st.integers(min_value=0, max_value=10**9))),
    )


class TestSynthesize:
    """Test item derivation from episodes."""

    def test_channel_metadata_is_static(self):
        document = synthesize([make_episode(1)], FEED, clock=lambda: NOW)

        assert document.title == "GopherPods"
        assert document.link == "https://gopherpods.example.com"
        assert document.description == "Podcasts about Go (golang)"
        assert document.image_url == "https://gopherpods.example.com/gopher.png"
        assert document.updated == NOW

    def test_updated_is_synthesis_time_not_item_date(self):
        document = synthesize([make_episode(1, day=date(2030, 1, 1))], FEED, clock=lambda: NOW)

        assert document.updated == NOW

    def test_item_fields(self):
        [item] = synthesize([make_episode(7, size_bytes=2048, runtime_seconds=65)], FEED).items

        assert item.guid == "https://example.com/ep7"
        assert item.title == "Go Time - Episode 7"
        assert item.link == "https://example.com/ep7"
        assert item.published == datetime(2024, 1, 2, tzinfo=timezone.utc)
        assert item.enclosure_url == "https://example.com/ep7"
        assert item.enclosure_length == 2048
        assert item.enclosure_type == AUDIO_MIME_TYPE
        assert item.duration_seconds == 65

    def test_enclosure_prefers_media_url(self):
        episode = make_episode(1, media_url="https://cdn.example.com/1.mp3")

        [item] = synthesize([episode], FEED).items

        assert item.enclosure_url == "https://cdn.example.com/1.mp3"
        assert item.link == "https://example.com/ep1"
        assert item.guid == "https://example.com/ep1"

    def test_media_link_source(self):
        episode = make_episode(1, media_url="https://cdn.example.com/1.mp3")

        [item] = synthesize([episode], FEED, link_source=LINK_TO_MEDIA).items

        assert item.link == "https://cdn.example.com/1.mp3"
        assert item.guid == "https://example.com/ep1"

    def test_unknown_link_source(self):
        with pytest.raises(ValueError):
            synthesize([], FEED, link_source="guid")

    def test_preserves_input_order(self):
        episodes = [
            make_episode(1, day=date(2020, 1, 1)),
            make_episode(2, day=date(2024, 1, 1)),
            make_episode(3, day=date(2022, 1, 1)),
        ]

        items = synthesize(episodes, FEED).items

        assert [item.guid for item in items] == [ep.episode_url for ep in episodes]

    @settings(max_examples=50, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    @given(st.lists(episode_strategy(), max_size=8))
    def test_deterministic_apart_from_timestamp(self, episodes):
        first = synthesize(episodes, FEED, clock=lambda: NOW)
        second = synthesize(episodes, FEED, clock=lambda: datetime(2025, 1, 1, tzinfo=timezone.utc))

        assert first.items == second.items
        assert first.updated != second.updated


class TestRenderRss:
    """Test RSS serialization."""

    def test_feedparser_reads_channel_and_items(self):
        episodes = [
            make_episode(2, day=date(2024, 2, 1), media_url="https://cdn.example.com/2.mp3",
                         size_bytes=1000, runtime_seconds=3725),
            make_episode(1, day=date(2024, 1, 1)),
        ]

        parsed = feedparser.parse(render_rss(synthesize(episodes, FEED, clock=lambda: NOW)))

        assert parsed.bozo == 0
        assert parsed.feed.title == "GopherPods"
        assert parsed.feed.link == "https://gopherpods.example.com"
        assert [entry.id for entry in parsed.entries] == [
            "https://example.com/ep2",
            "https://example.com/ep1",
        ]
        first = parsed.entries[0]
        assert first.title == "Go Time - Episode 2"
        assert first.enclosures[0].href == "https://cdn.example.com/2.mp3"
        assert first.enclosures[0].type == "audio/mpeg"
        assert first.enclosures[0].length == "1000"
        assert first.itunes_duration == "01:02:05"
        assert first.published_parsed[:3] == (2024, 2, 1)

    def test_last_build_date_is_synthesis_time(self):
        body = render_rss(synthesize([], FEED, clock=lambda: NOW)).decode("utf-8")

        assert "<lastBuildDate>Sat, 01 Jun 2024 08:30:00 GMT</lastBuildDate>" in body

    def test_text_is_escaped(self):
        episode = make_episode(1, description="a < b & c")

        body = render_rss(synthesize([episode], FEED)).decode("utf-8")

        assert "<description>a &lt; b &amp; c</description>" in body

    def test_render_failure_propagates(self):
        document = synthesize([make_episode(1)], FEED)

        with patch("gopherpods.feed.rss._add_item", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                render_rss(document)

    def test_render_starts_with_declaration(self):
        body = render_rss(synthesize([make_episode(1)], FEED))

        assert body.startswith(b"<?xml")

"""Build the syndication document from the current catalog."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Tuple

from ..config import FeedConfig
from ..models.episode import Episode


AUDIO_MIME_TYPE = "audio/mpeg"

LINK_TO_EPISODE = "episode"
LINK_TO_MEDIA = "media"


@dataclass(frozen=True)
class FeedItem:
    """One feed entry. ``guid`` is the episode URL so readers dedupe stably."""

    guid: str
    title: str
    link: str
    description: str
    published: datetime
    enclosure_url: str
    enclosure_length: int
    enclosure_type: str = AUDIO_MIME_TYPE
    duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class FeedDocument:
    title: str
    link: str
    description: str
    image_url: str
    updated: datetime
    items: Tuple[FeedItem, ...]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_item(episode: Episode, link_source: str = LINK_TO_EPISODE) -> FeedItem:
    link = episode.enclosure_url if link_source == LINK_TO_MEDIA else episode.episode_url
    return FeedItem(
        guid=episode.episode_url,
        title=f"{episode.show} - {episode.title}",
        link=link,
        description=episode.description,
        published=datetime(
            episode.episode_date.year,
            episode.episode_date.month,
            episode.episode_date.day,
            tzinfo=timezone.utc,
        ),
        enclosure_url=episode.enclosure_url,
        enclosure_length=episode.size_bytes or 0,
        duration_seconds=episode.runtime_seconds,
    )


def synthesize(
    episodes: Sequence[Episode],
    config: FeedConfig,
    link_source: str = LINK_TO_EPISODE,
    clock: Callable[[], datetime] = _utcnow,
) -> FeedDocument:
    """
    Turn an ordered episode list into a feed document.

    Items keep the input order. Channel metadata comes from configuration and
    ``updated`` is the synthesis time, not the newest item date.

    Args:
        episodes: Episodes in the order they should appear
        config: Static channel metadata
        link_source: ``"episode"`` links items to the episode page,
            ``"media"`` to the audio asset
        clock: Source of the feed timestamp
    """
    if link_source not in (LINK_TO_EPISODE, LINK_TO_MEDIA):
        raise ValueError(f"unknown link source {link_source!r}")

    return FeedDocument(
        title=config.title,
        link=config.link,
        description=config.description,
        image_url=config.image_url,
        updated=clock(),
        items=tuple(build_item(episode, link_source) for episode in episodes),
    )

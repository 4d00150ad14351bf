"""Syndication feed synthesis and RSS output."""

from .rss import CONTENT_TYPE, render_rss
from .synthesizer import (
    AUDIO_MIME_TYPE,
    LINK_TO_EPISODE,
    LINK_TO_MEDIA,
    FeedDocument,
    FeedItem,
    synthesize,
)

__all__ = [
    "CONTENT_TYPE",
    "render_rss",
    "AUDIO_MIME_TYPE",
    "LINK_TO_EPISODE",
    "LINK_TO_MEDIA",
    "FeedDocument",
    "FeedItem",
    "synthesize",
]

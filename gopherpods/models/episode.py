"""Data model for published catalog episodes."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from ..utils.text import DATE_FORMAT, DISPLAY_DATE_FORMAT


@dataclass(frozen=True)
class Episode:
    """A published catalog entry, visible on the site and in the feed."""

    id: int
    show: str
    title: str
    description: str
    episode_url: str
    episode_date: date
    added_at: datetime
    media_url: Optional[str] = None
    runtime_seconds: Optional[int] = None
    size_bytes: Optional[int] = None

    @property
    def enclosure_url(self) -> str:
        """Direct audio link, falling back to the episode page."""
        return self.media_url or self.episode_url

    @property
    def date_formatted(self) -> str:
        return self.episode_date.strftime(DISPLAY_DATE_FORMAT)

    def to_record(self) -> Dict[str, Any]:
        """Convert Episode to the flat record persisted by a RecordStore."""
        return {
            "id": self.id,
            "show": self.show,
            "title": self.title,
            "description": self.description,
            "episode_url": self.episode_url,
            "media_url": self.media_url,
            "runtime_seconds": self.runtime_seconds,
            "size_bytes": self.size_bytes,
            "episode_date": self.episode_date.strftime(DATE_FORMAT),
            "added_at": self.added_at.isoformat(timespec="microseconds"),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Episode":
        return cls(
            id=int(record["id"]),
            show=record.get("show") or "",
            title=record.get("title") or "",
            description=record.get("description") or "",
            episode_url=record["episode_url"],
            media_url=record.get("media_url") or None,
            runtime_seconds=_optional_int(record.get("runtime_seconds")),
            size_bytes=_optional_int(record.get("size_bytes")),
            episode_date=datetime.strptime(record["episode_date"], DATE_FORMAT).date(),
            added_at=datetime.fromisoformat(record["added_at"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Episode to dictionary for JSON serialization."""
        return {
            "episode_id": self.id,
            "show": self.show,
            "title": self.title,
            "description": self.description,
            "episode_url": self.episode_url,
            "media_url": self.media_url,
            "runtime_seconds": self.runtime_seconds,
            "size_bytes": self.size_bytes,
            "episode_date": self.episode_date.isoformat(),
            "added_at": self.added_at.isoformat(),
        }

    def to_dump_dict(self) -> Dict[str, Any]:
        """Public dump shape: show, title, about, url, date, added."""
        dump = {
            "show": self.show,
            "title": self.title,
            "about": self.description,
            "url": self.episode_url,
            "date": self.episode_date.isoformat(),
            "added": self.added_at.isoformat(),
        }
        if self.media_url:
            dump["media"] = self.media_url
        return dump


def _optional_int(value: Any) -> Optional[int]:
    # DynamoDB hands numbers back as Decimal
    return None if value is None else int(value)

"""Data models for pending submissions awaiting moderation."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from ..utils.text import DATE_FORMAT


@dataclass(frozen=True)
class SubmissionInput:
    """
    Sanitized intake from the public form.

    The URL is the only field the current form asks for. The remaining
    fields are filled in by the legacy full-metadata form.
    """

    submission_url: str
    show: str = ""
    title: str = ""
    description: str = ""
    episode_date: Optional[date] = None

    @property
    def is_legacy(self) -> bool:
        return bool(self.show or self.title or self.description or self.episode_date)


@dataclass(frozen=True)
class Submission:
    """A candidate episode in the moderation queue."""

    submission_url: str
    submitted_at: datetime
    show: str = ""
    title: str = ""
    description: str = ""
    episode_date: Optional[date] = None
    key: str = ""  # opaque, only ever shown to moderators

    @property
    def date_formatted(self) -> str:
        return self.episode_date.strftime(DATE_FORMAT) if self.episode_date else ""

    @classmethod
    def from_input(cls, data: SubmissionInput, submitted_at: datetime) -> "Submission":
        return cls(
            submission_url=data.submission_url,
            submitted_at=submitted_at,
            show=data.show,
            title=data.title,
            description=data.description,
            episode_date=data.episode_date,
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "submission_url": self.submission_url,
            "submitted_at": self.submitted_at.isoformat(timespec="microseconds"),
        }
        if self.show:
            record["show"] = self.show
        if self.title:
            record["title"] = self.title
        if self.description:
            record["description"] = self.description
        if self.episode_date:
            record["episode_date"] = self.episode_date.strftime(DATE_FORMAT)
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any], key: str = "") -> "Submission":
        episode_date = record.get("episode_date")
        return cls(
            submission_url=record["submission_url"],
            submitted_at=datetime.fromisoformat(record["submitted_at"]),
            show=record.get("show", ""),
            title=record.get("title", ""),
            description=record.get("description", ""),
            episode_date=(
                datetime.strptime(episode_date, DATE_FORMAT).date() if episode_date else None
            ),
            key=key,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Submission to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "submission_url": self.submission_url,
            "submitted_at": self.submitted_at.isoformat(),
            "show": self.show,
            "title": self.title,
            "description": self.description,
            "episode_date": self.episode_date.isoformat() if self.episode_date else None,
        }

"""Moderation lifecycle: intake, review, promotion and rejection."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..catalog.cache import CatalogCache
from ..catalog.repository import EpisodeRepository
from ..errors import GateFailure, StoreError, ValidationError
from ..models.episode import Episode
from ..models.submission import Submission, SubmissionInput
from ..storage.base import SUBMISSIONS
from ..storage.keys import decode_key
from ..utils.logging import get_logger, log_with_context
from ..utils.text import parse_date, parse_optional_int, sanitize, validate_url
from .gate import AbuseGate
from .repository import SubmissionRepository


logger = get_logger("ModerationWorkflow")

CAPTCHA_FIELD = "g-recaptcha-response"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _first(fields: Mapping[str, Any], *names: str) -> Optional[str]:
    for name in names:
        value = fields.get(name)
        if value is not None and str(value).strip():
            return str(value)
    return None


def parse_submission_input(form: Mapping[str, Any]) -> SubmissionInput:
    """
    Sanitize and validate the public intake form.

    The URL-only form sends ``url``. The legacy form also sends ``show``,
    ``title``, ``desc`` and ``date``; a non-empty date must be YYYY-MM-DD.

    Raises:
        ValidationError: For a missing or non-http(s) URL or a bad date
    """
    submission_url = validate_url(_first(form, "url", "submission_url"), "url")

    raw_date = _first(form, "date", "episode_date")
    episode_date = parse_date(raw_date) if raw_date else None

    return SubmissionInput(
        submission_url=submission_url,
        show=sanitize(_first(form, "show")),
        title=sanitize(_first(form, "title")),
        description=sanitize(_first(form, "desc", "description")),
        episode_date=episode_date,
    )


def parse_episode_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate moderator-supplied episode fields.

    Returns keyword arguments for ``Episode`` minus ``id`` and ``added_at``.

    Raises:
        ValidationError: For missing show/title/url/date or malformed values
    """
    show = sanitize(_first(fields, "show"))
    title = sanitize(_first(fields, "title"))
    if not show:
        raise ValidationError("show is required")
    if not title:
        raise ValidationError("title is required")

    media = _first(fields, "media_url", "media")

    return {
        "show": show,
        "title": title,
        "description": sanitize(_first(fields, "desc", "description")),
        "episode_url": validate_url(_first(fields, "url", "episode_url"), "url"),
        "media_url": validate_url(media, "media_url") if media else None,
        "runtime_seconds": parse_optional_int(
            _first(fields, "runtime", "runtime_seconds"), "runtime"
        ),
        "size_bytes": parse_optional_int(_first(fields, "size", "size_bytes"), "size"),
        "episode_date": parse_date(_first(fields, "date", "episode_date")),
    }


class ModerationWorkflow:
    """
    Moves untrusted public submissions into the published catalog.

    A submission is consumed exactly once: promotion writes an Episode and
    deletes the submission, rejection only deletes it. The two stores are not
    updated atomically. If the submission delete fails after the episode was
    written, both records remain; the failure is logged and surfaced, and the
    stale submission stays visible in the queue for a moderator to reject.
    """

    def __init__(
        self,
        episodes: EpisodeRepository,
        submissions: SubmissionRepository,
        cache: CatalogCache,
        gate: AbuseGate,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.episodes = episodes
        self.submissions = submissions
        self.cache = cache
        self.gate = gate
        self._clock = clock

    def submit(self, form: Mapping[str, Any], client_address: Optional[str]) -> Submission:
        """
        Run the abuse gate, then sanitize and queue a public submission.

        Returns:
            The stored Submission, carrying its opaque key

        Raises:
            GateFailure: The gate judged the request to be spam
            GateUnavailableError: The gate could not be consulted
            ValidationError: The form is malformed
            StoreError: The submission could not be persisted
        """
        if not self.gate.verify(str(form.get(CAPTCHA_FIELD) or ""), client_address):
            log_with_context(
                logger,
                logging.WARNING,
                "Abuse gate check failed, submission dropped",
                context={"client_address": client_address},
            )
            raise GateFailure("abuse gate check failed")

        data = parse_submission_input(form)
        submission = Submission.from_input(data, submitted_at=self._clock())
        key = self.submissions.add(submission)

        log_with_context(
            logger,
            logging.INFO,
            "Submission queued",
            context={"submission_url": submission.submission_url, "legacy_form": data.is_legacy},
        )
        return replace(submission, key=key)

    def list_pending(self) -> List[Submission]:
        """All pending submissions, oldest first, each with its opaque key."""
        return self.submissions.list_oldest_first()

    def pending_count(self) -> int:
        return self.submissions.count()

    def promote(self, key: str, fields: Mapping[str, Any]) -> Episode:
        """
        Publish a pending submission as a new Episode.

        Raises:
            DecodeError: The key is malformed
            ValidationError: The moderator fields are malformed
            StoreError: A store call failed
        """
        decode_key(key, SUBMISSIONS)
        episode = self._write_episode(fields)

        try:
            self.submissions.delete(key)
        except StoreError:
            log_with_context(
                logger,
                logging.ERROR,
                "Episode written but submission delete failed; both records remain",
                context={"episode_id": episode.id, "submission_key": key},
                exc_info=True,
            )
            self.cache.invalidate()
            raise

        self.cache.invalidate()
        log_with_context(
            logger,
            logging.INFO,
            "Submission promoted",
            context={"episode_id": episode.id, "episode_url": episode.episode_url},
        )
        return episode

    def reject(self, key: str) -> None:
        """
        Drop a pending submission. Rejecting an already-consumed key is a no-op.

        Raises:
            DecodeError: The key is malformed
            StoreError: The delete failed
        """
        raw_key = self.submissions.delete(key)
        log_with_context(
            logger,
            logging.INFO,
            "Submission rejected",
            context={"submission_key": raw_key},
        )

    def add_episode(self, fields: Mapping[str, Any]) -> Episode:
        """Moderator entry of an episode that never went through the queue."""
        episode = self._write_episode(fields)
        self.cache.invalidate()
        log_with_context(
            logger,
            logging.INFO,
            "Episode added directly",
            context={"episode_id": episode.id, "episode_url": episode.episode_url},
        )
        return episode

    def _write_episode(self, fields: Mapping[str, Any]) -> Episode:
        values = parse_episode_fields(fields)
        episode = Episode(id=self.episodes.allocate_id(), added_at=self._clock(), **values)
        self.episodes.add(episode)
        return episode

"""Data models for episodes and moderation submissions."""

from .episode import Episode
from .submission import Submission, SubmissionInput

__all__ = ["Episode", "Submission", "SubmissionInput"]

"""Moderation queue: abuse gate, lifecycle workflow and notifications."""

from .gate import AbuseGate, BypassGate, RecaptchaGate
from .notify import LogNotifier, NotificationSweep, Notifier, SESNotifier
from .repository import SubmissionRepository
from .workflow import ModerationWorkflow, parse_episode_fields, parse_submission_input

__all__ = [
    "AbuseGate",
    "BypassGate",
    "RecaptchaGate",
    "LogNotifier",
    "NotificationSweep",
    "Notifier",
    "SESNotifier",
    "SubmissionRepository",
    "ModerationWorkflow",
    "parse_episode_fields",
    "parse_submission_input",
]

"""Periodic moderator notification about the pending queue."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import NotificationError
from ..utils.logging import get_logger, log_with_context


logger = get_logger("NotificationSweep")

SUBJECT = "GopherPods"


def pending_message(count: int) -> str:
    return f"There are {count} submissions"


class Notifier(ABC):
    """Tells the moderators how many submissions are waiting."""

    @abstractmethod
    def notify(self, count: int) -> None:
        """Send the notification, raising NotificationError on failure."""


class LogNotifier(Notifier):
    """Development notifier that only writes a log line."""

    def notify(self, count: int) -> None:
        log_with_context(
            logger,
            logging.INFO,
            pending_message(count),
            context={"pending_count": count},
        )


class SESNotifier(Notifier):
    """Emails the admin list through Amazon SES."""

    def __init__(self, client: Any, sender: str, recipients: Sequence[str]):
        """
        Args:
            client: boto3 SES client
            sender: Verified sender address
            recipients: Admin addresses; defaults to the sender when empty
        """
        self.client = client
        self.sender = sender
        self.recipients = list(recipients) or [sender]

    def notify(self, count: int) -> None:
        try:
            self.client.send_email(
                Source=self.sender,
                Destination={"ToAddresses": self.recipients},
                Message={
                    "Subject": {"Data": SUBJECT},
                    "Body": {"Text": {"Data": pending_message(count)}},
                },
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "SES send_email failed",
                exc_info=True,
                extra={"context": {"recipients": self.recipients, "error": str(e)}}
            )
            raise NotificationError(f"failed to send notification: {e}") from e

        log_with_context(
            logger,
            logging.INFO,
            "Moderators notified",
            context={"pending_count": count, "recipients": len(self.recipients)},
        )


class NotificationSweep:
    """
    Counts pending submissions and notifies when there are any.

    Invoked by an external scheduler through ``GET /tasks/email``.
    """

    def __init__(self, pending_count: Callable[[], int], notifier: Notifier):
        self.pending_count = pending_count
        self.notifier = notifier

    def run(self) -> int:
        """Return the pending count; zero means nobody was notified."""
        count = self.pending_count()
        if count == 0:
            logger.debug("No pending submissions")
            return 0

        self.notifier.notify(count)
        return count

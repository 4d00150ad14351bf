"""Human-verification check run before a submission is accepted."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..errors import GateUnavailableError
from ..utils.logging import get_logger, log_with_context


logger = get_logger("AbuseGate")


class AbuseGate(ABC):
    """Decides whether a public submission comes from a human."""

    @abstractmethod
    def verify(self, token: str, client_address: Optional[str]) -> bool:
        """
        Return True when the token checks out for this client.

        Raises:
            GateUnavailableError: If no verdict could be obtained
        """


class BypassGate(AbuseGate):
    """Development gate that accepts everything. Only built for ``GATE_MODE=bypass``."""

    def verify(self, token: str, client_address: Optional[str]) -> bool:
        logger.debug("Abuse gate bypassed")
        return True


class RecaptchaGate(AbuseGate):
    """
    Verifies reCAPTCHA tokens against the siteverify endpoint.

    A negative answer is a verdict (False). Transport errors, non-2xx
    responses and unreadable bodies mean no verdict and raise
    GateUnavailableError.
    """

    def __init__(self, secret: str, verify_url: str, client: httpx.Client):
        """
        Args:
            secret: Site secret shared with the verification service
            verify_url: siteverify endpoint
            client: httpx client carrying the request timeout
        """
        self.secret = secret
        self.verify_url = verify_url
        self.client = client

    def verify(self, token: str, client_address: Optional[str]) -> bool:
        form = {"secret": self.secret, "response": token or ""}
        if client_address:
            form["remoteip"] = client_address

        try:
            response = self.client.post(self.verify_url, data=form)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            logger.error(
                "Verification request failed",
                exc_info=True,
                extra={"context": {"verify_url": self.verify_url, "error": str(e)}}
            )
            raise GateUnavailableError(f"verification request failed: {e}") from e
        except ValueError as e:
            raise GateUnavailableError("verification service returned invalid JSON") from e

        if not isinstance(payload, dict):
            raise GateUnavailableError("verification service returned an unexpected body")

        if payload.get("success") is not True:
            log_with_context(
                logger,
                logging.WARNING,
                "Verification rejected",
                context={
                    "client_address": client_address,
                    "error_codes": payload.get("error-codes", []),
                },
            )
            return False

        return True

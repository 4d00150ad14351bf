"""AWS client management and authentication."""

import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError, ProfileNotFound

from ..utils.logging import get_logger, log_with_context


logger = get_logger("AWSClientManager")


class AWSClientManager:
    """
    Owns the boto3 session and the service clients built from it.

    Uses a named profile for local runs and the default credential chain
    (environment, instance role) everywhere else. Clients are created lazily
    and reused for the life of the process.
    """

    def __init__(self, profile: Optional[str], region: str):
        """
        Initialize AWS Client Manager.

        Args:
            profile: AWS profile name (None to use default credential chain)
            region: AWS region (e.g., "us-east-1")
        """
        self.profile = profile
        self.region = region
        self._session: Optional[boto3.Session] = None
        self._clients: Dict[str, Any] = {}

        self._initialize_session()

    def _initialize_session(self) -> None:
        try:
            if self.profile:
                logger.info(f"Initializing AWS session with profile: {self.profile}")
                self._session = boto3.Session(
                    profile_name=self.profile,
                    region_name=self.region
                )
            else:
                logger.info("Initializing AWS session with default credential chain")
                self._session = boto3.Session(region_name=self.region)

        except ProfileNotFound as e:
            logger.error(
                f"AWS profile '{self.profile}' not found",
                exc_info=True,
                extra={"context": {"profile": self.profile}}
            )
            raise ValueError(
                f"AWS profile '{self.profile}' not found. "
                f"Check your ~/.aws/credentials file."
            ) from e
        except Exception as e:
            logger.error(
                "Failed to initialize AWS session",
                exc_info=True,
                extra={"context": {"error": str(e)}}
            )
            raise RuntimeError(
                f"Failed to initialize AWS session: {str(e)}"
            ) from e

    def _get_client(self, service_name: str):
        if service_name not in self._clients:
            try:
                logger.info(f"Creating {service_name} client")
                self._clients[service_name] = self._session.client(
                    service_name,
                    region_name=self.region
                )
            except Exception as e:
                logger.error(
                    f"Failed to create {service_name} client",
                    exc_info=True,
                    extra={"context": {"region": self.region, "error": str(e)}}
                )
                raise RuntimeError(
                    f"Failed to create {service_name} client: {str(e)}"
                ) from e

        return self._clients[service_name]

    def get_dynamodb_client(self):
        """Low-level DynamoDB client backing the record store."""
        return self._get_client("dynamodb")

    def get_ses_client(self):
        """SES client used for moderator notifications."""
        return self._get_client("ses")

    def verify_credentials(self) -> bool:
        """
        Verify AWS credentials are valid by calling STS GetCallerIdentity.

        Returns:
            True if credentials are valid

        Raises:
            NoCredentialsError: If no credentials are found
            ClientError: If credentials are invalid or expired
            RuntimeError: If verification fails for other reasons
        """
        try:
            logger.info("Verifying AWS credentials")
            response = self._session.client("sts").get_caller_identity()

            log_with_context(
                logger,
                logging.INFO,
                "AWS credentials verified successfully",
                context={
                    "account_id": response.get("Account"),
                    "arn": response.get("Arn")
                }
            )
            return True

        except NoCredentialsError:
            logger.error("No AWS credentials found", exc_info=True)
            raise
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = e.response.get("Error", {}).get("Message", str(e))

            log_with_context(
                logger,
                logging.ERROR,
                "AWS credential verification failed",
                context={
                    "error_code": error_code,
                    "error_message": error_message
                },
                error_code=error_code
            )
            raise
        except Exception as e:
            logger.error(
                "Unexpected error during credential verification",
                exc_info=True,
                extra={"context": {"error": str(e)}}
            )
            raise RuntimeError(
                f"Unexpected error during credential verification: {str(e)}"
            ) from e

"""Process-start initialization and server assembly."""

import logging
import sys
from typing import Optional, Tuple

import httpx
from fastmcp import FastMCP

from .aws.client_manager import AWSClientManager
from .catalog.cache import CatalogCache, InMemoryCache
from .catalog.repository import EpisodeRepository
from .config import ServerConfig
from .moderation.gate import AbuseGate, BypassGate, RecaptchaGate
from .moderation.notify import LogNotifier, NotificationSweep, Notifier, SESNotifier
from .moderation.repository import SubmissionRepository
from .moderation.workflow import ModerationWorkflow
from .storage.base import RecordStore
from .storage.dynamodb import DynamoDBStore
from .storage.memory import InMemoryStore
from .utils.logging import configure_logging, get_logger, log_with_context
from .web.app import create_app
from .web.components import AppComponents
from .web.render import PageRenderer


logger = get_logger("Server")


def _needs_aws(config: ServerConfig) -> bool:
    return config.store_backend == "dynamodb" or config.notifier == "ses"


def build_store(config: ServerConfig, aws_client: Optional[AWSClientManager]) -> RecordStore:
    if config.store_backend == "dynamodb":
        return DynamoDBStore(aws_client.get_dynamodb_client(), config.dynamodb_table)
    return InMemoryStore()


def build_gate(config: ServerConfig) -> AbuseGate:
    if config.gate_bypassed:
        logger.warning("GATE_MODE=bypass: abuse gate disabled, every submission is accepted")
        return BypassGate()
    return RecaptchaGate(
        config.recaptcha_secret,
        config.recaptcha_verify_url,
        httpx.Client(timeout=config.recaptcha_timeout_seconds),
    )


def build_notifier(config: ServerConfig, aws_client: Optional[AWSClientManager]) -> Notifier:
    if config.notifier == "ses":
        return SESNotifier(aws_client.get_ses_client(), config.email_sender, config.admin_emails)
    return LogNotifier()


def build_components(
    config: ServerConfig,
    aws_client: Optional[AWSClientManager] = None,
    store: Optional[RecordStore] = None,
    gate: Optional[AbuseGate] = None,
) -> AppComponents:
    """
    Wire every component from configuration.

    ``store`` and ``gate`` can be supplied to replace the configured ones.
    """
    store = store or build_store(config, aws_client)
    episodes = EpisodeRepository(store, config.id_block_size)
    submissions = SubmissionRepository(store)
    cache = CatalogCache(episodes, InMemoryCache(), config.cache_ttl_seconds)
    workflow = ModerationWorkflow(episodes, submissions, cache, gate or build_gate(config))
    sweep = NotificationSweep(workflow.pending_count, build_notifier(config, aws_client))

    return AppComponents(
        config=config,
        cache=cache,
        workflow=workflow,
        sweep=sweep,
        renderer=PageRenderer(config.recaptcha_site_key),
    )


def initialize_server(config: Optional[ServerConfig] = None) -> Tuple[AppComponents, FastMCP]:
    """
    Load configuration, build components and the server.

    Returns:
        Tuple of (AppComponents, FastMCP server)

    Raises:
        SystemExit: If initialization fails
    """
    try:
        if config is None:
            config = ServerConfig.from_environment()
        configure_logging(config.log_level)

        logger.info("Starting GopherPods initialization")
        log_with_context(
            logger,
            logging.INFO,
            "Configuration loaded",
            context={
                "gate_mode": config.gate_mode,
                "store_backend": config.store_backend,
                "notifier": config.notifier,
                "cache_ttl_seconds": config.cache_ttl_seconds,
            }
        )

        aws_client = None
        if _needs_aws(config):
            aws_client = AWSClientManager(config.aws_profile, config.aws_region)
            aws_client.verify_credentials()

        components = build_components(config, aws_client)
        mcp = create_app(components)

        logger.info("GopherPods initialization complete")
        return components, mcp

    except Exception as e:
        logger.error(
            "Failed to initialize server",
            exc_info=True,
            extra={"context": {"error": str(e)}}
        )
        sys.exit(1)

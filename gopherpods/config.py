"""Configuration management for the GopherPods service."""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


GATE_MODES = ("live", "bypass")
STORE_BACKENDS = ("memory", "dynamodb")
NOTIFIERS = ("log", "ses")

DEFAULT_SITE_URL = "https://gopherpods.appspot.com"
DEFAULT_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


@dataclass(frozen=True)
class FeedConfig:
    """Static channel metadata for the syndication feed."""

    title: str = "GopherPods"
    link: str = DEFAULT_SITE_URL
    description: str = "Podcasts about Go (golang)"
    image_url: str = f"{DEFAULT_SITE_URL}/static/img/gopher.png"


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the GopherPods service, read once at process start."""

    log_level: str = "INFO"
    gate_mode: str = "live"  # "bypass" is the explicit development mode
    recaptcha_secret: str = ""
    recaptcha_site_key: str = ""
    recaptcha_verify_url: str = DEFAULT_VERIFY_URL
    recaptcha_timeout_seconds: float = 10.0
    notifier: str = "log"
    email_sender: str = ""
    admin_emails: Tuple[str, ...] = ()
    store_backend: str = "memory"
    dynamodb_table: str = "gopherpods"
    aws_profile: Optional[str] = None
    aws_region: str = "us-east-1"
    cache_ttl_seconds: int = 3600
    id_block_size: int = 100
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    feed: FeedConfig = field(default_factory=FeedConfig)

    @property
    def gate_bypassed(self) -> bool:
        return self.gate_mode == "bypass"

    def validate(self) -> None:
        """
        Validate configuration fields.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        if self.gate_mode not in GATE_MODES:
            raise ValueError(f"gate_mode must be one of {GATE_MODES}, got {self.gate_mode!r}")

        if self.gate_mode == "live" and not self.recaptcha_secret:
            raise ValueError("recaptcha_secret is required when gate_mode is 'live'")

        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}"
            )

        if self.store_backend == "dynamodb" and not self.dynamodb_table:
            raise ValueError("dynamodb_table is required for the dynamodb store")

        if self.notifier not in NOTIFIERS:
            raise ValueError(f"notifier must be one of {NOTIFIERS}, got {self.notifier!r}")

        if self.notifier == "ses" and not self.email_sender:
            raise ValueError("email_sender is required for the ses notifier")

        if self.cache_ttl_seconds <= 0:
            raise ValueError("cache_ttl_seconds must be positive")

        if self.id_block_size <= 0:
            raise ValueError("id_block_size must be positive")

        if self.recaptcha_timeout_seconds <= 0:
            raise ValueError("recaptcha_timeout_seconds must be positive")

        if not self.feed.title or not self.feed.link:
            raise ValueError("feed title and link are required")

    @classmethod
    def from_environment(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        site_url = os.getenv("SITE_URL", DEFAULT_SITE_URL).rstrip("/")
        feed = FeedConfig(
            title=os.getenv("FEED_TITLE", "GopherPods"),
            link=site_url,
            description=os.getenv("FEED_DESCRIPTION", "Podcasts about Go (golang)"),
            image_url=os.getenv("FEED_IMAGE_URL", f"{site_url}/static/img/gopher.png"),
        )
        admin_emails = tuple(
            address.strip()
            for address in os.getenv("ADMIN_EMAILS", "").split(",")
            if address.strip()
        )
        config = cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            gate_mode=os.getenv("GATE_MODE", "live").strip().lower(),
            recaptcha_secret=os.getenv("RECAPTCHA_SECRET", ""),
            recaptcha_site_key=os.getenv("RECAPTCHA_SITE_KEY", ""),
            recaptcha_verify_url=os.getenv("RECAPTCHA_VERIFY_URL", DEFAULT_VERIFY_URL),
            recaptcha_timeout_seconds=float(os.getenv("RECAPTCHA_TIMEOUT_SECONDS", "10")),
            notifier=os.getenv("NOTIFIER", "log").strip().lower(),
            email_sender=os.getenv("EMAIL_SENDER", ""),
            admin_emails=admin_emails,
            store_backend=os.getenv("STORE_BACKEND", "memory").strip().lower(),
            dynamodb_table=os.getenv("DYNAMODB_TABLE", "gopherpods"),
            aws_profile=os.getenv("AWS_PROFILE") or None,
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", "3600")),
            id_block_size=int(os.getenv("ID_BLOCK_SIZE", "100")),
            http_host=os.getenv("HTTP_HOST", "0.0.0.0"),
            http_port=int(os.getenv("HTTP_PORT", "8080")),
            feed=feed,
        )
        config.validate()
        return config

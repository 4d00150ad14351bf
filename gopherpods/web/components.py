"""Immutable bundle of the objects request handlers need."""

from dataclasses import dataclass

from ..catalog.cache import CatalogCache
from ..config import ServerConfig
from ..moderation.notify import NotificationSweep
from ..moderation.workflow import ModerationWorkflow
from .render import PageRenderer


@dataclass(frozen=True)
class AppComponents:
    config: ServerConfig
    cache: CatalogCache
    workflow: ModerationWorkflow
    sweep: NotificationSweep
    renderer: PageRenderer

"""HTTP routes, page rendering and request error mapping."""

from .app import ERROR_BODY, create_app, handle_errors
from .components import AppComponents
from .render import PageRenderer

__all__ = ["ERROR_BODY", "create_app", "handle_errors", "AppComponents", "PageRenderer"]

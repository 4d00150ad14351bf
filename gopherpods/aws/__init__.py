"""AWS session and client management."""

from .client_manager import AWSClientManager

__all__ = ["AWSClientManager"]

"""Exceptions raised by the catalog, moderation and storage layers."""


class GopherPodsError(Exception):
    """Base exception for all GopherPods errors."""

    pass


class ValidationError(GopherPodsError):
    """Malformed submitter or moderator input, e.g. an unparseable date."""

    pass


class DecodeError(GopherPodsError):
    """An opaque submission key could not be decoded."""

    pass


class GateFailure(GopherPodsError):
    """The abuse check rejected the request; the submission is treated as spam."""

    pass


class GateUnavailableError(GopherPodsError):
    """The verification service could not be reached or answered nonsense."""

    pass


class StoreError(GopherPodsError):
    """A persistence or query call against the record store failed."""

    pass


class CacheError(GopherPodsError):
    """A cache backend failed. Never propagated past the catalog cache."""

    pass


class NotificationError(GopherPodsError):
    """The moderator notification could not be sent."""

    pass

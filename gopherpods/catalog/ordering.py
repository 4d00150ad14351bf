"""Sort orders accepted by the catalog page."""

from typing import List, Sequence

from ..models.episode import Episode


DEFAULT_ORDER = "-episode_date"

_ORDERS = {
    "": DEFAULT_ORDER,
    "date": DEFAULT_ORDER,
    "title": "title",
    "show": "show",
}


def parse_order(value: str) -> str:
    """
    Map the ``order`` query parameter to a sort order.

    A leading ``-`` means descending. Unknown values fall back to newest
    first.
    """
    return _ORDERS.get((value or "").strip().lower(), DEFAULT_ORDER)


def sort_episodes(episodes: Sequence[Episode], order: str) -> List[Episode]:
    """Stable re-sort of an episode list by an order from ``parse_order``."""
    descending = order.startswith("-")
    field_name = order.lstrip("-")

    if field_name in ("title", "show"):
        return sorted(episodes, key=lambda ep: getattr(ep, field_name).lower(), reverse=descending)
    return sorted(episodes, key=lambda ep: getattr(ep, field_name), reverse=descending)

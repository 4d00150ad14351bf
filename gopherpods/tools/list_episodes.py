"""Tool for listing the whole catalog."""

import json
from typing import TYPE_CHECKING

from starlette.concurrency import run_in_threadpool

from ..catalog.ordering import parse_order, sort_episodes
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..catalog.cache import CatalogCache


logger = get_logger("ListEpisodesTool")


async def list_episodes_impl(order: str, cache: "CatalogCache") -> str:
    """Return every episode as JSON in the requested order."""
    try:
        episodes = sort_episodes(await run_in_threadpool(cache.get), parse_order(order))
    except Exception as e:
        logger.error(
            "list_episodes tool failed",
            exc_info=True,
            extra={"context": {"order": order, "error": str(e)}}
        )
        return json.dumps({
            "status": "error",
            "error_type": "ServerError",
            "message": "Failed to read the catalog",
        })

    return json.dumps({
        "status": "success",
        "count": len(episodes),
        "results": [ep.to_dict() for ep in episodes]
    })

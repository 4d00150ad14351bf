"""Tool for retrieving a catalog episode by id."""

import json
import logging
import time
from typing import TYPE_CHECKING

from starlette.concurrency import run_in_threadpool

from ..utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from ..catalog.cache import CatalogCache


logger = get_logger("GetEpisodeByIdTool")


async def get_episode_by_id_impl(episode_id: int, cache: "CatalogCache") -> str:
    """
    Get detailed information about one catalog episode.

    Args:
        episode_id: Numeric episode id
        cache: Catalog cache to read from

    Returns:
        JSON string with episode details or error message
    """
    start_time = time.time()

    if isinstance(episode_id, bool) or not isinstance(episode_id, int) or episode_id <= 0:
        logger.warning(
            f"Invalid episode ID provided: {episode_id}",
            extra={"context": {"episode_id": episode_id}}
        )
        return json.dumps({
            "status": "error",
            "error_type": "ValidationError",
            "message": f"Invalid episode ID: {episode_id}. Must be a positive integer.",
        })

    try:
        episodes = await run_in_threadpool(cache.get)
        episode = next((ep for ep in episodes if ep.id == episode_id), None)
        execution_time_ms = (time.time() - start_time) * 1000

        log_with_context(
            logger,
            logging.INFO,
            "get_episode_by_id tool completed",
            context={"episode_id": episode_id, "found": episode is not None},
            execution_time_ms=execution_time_ms
        )

        if episode is None:
            return json.dumps({
                "status": "error",
                "error_type": "NotFoundError",
                "message": f"Episode {episode_id} not found",
            })

        return json.dumps({
            "status": "success",
            "count": 1,
            "results": [episode.to_dict()]
        })
    except Exception as e:
        logger.error(
            "get_episode_by_id tool failed",
            exc_info=True,
            extra={
                "context": {"episode_id": episode_id, "error": str(e)},
                "execution_time_ms": (time.time() - start_time) * 1000
            }
        )
        return json.dumps({
            "status": "error",
            "error_type": "ServerError",
            "message": "Failed to read the catalog",
        })

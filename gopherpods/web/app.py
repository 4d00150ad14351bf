"""HTTP surface: catalog pages, feeds and the moderation endpoints."""

import functools
import logging
import time
from typing import Awaitable, Callable, Optional

from fastmcp import FastMCP
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from ..catalog.ordering import parse_order, sort_episodes
from ..errors import DecodeError, GateFailure, ValidationError
from ..feed.rss import CONTENT_TYPE, render_rss
from ..feed.synthesizer import LINK_TO_EPISODE, LINK_TO_MEDIA, synthesize
from ..tools.get_episode_by_id import get_episode_by_id_impl
from ..tools.list_episodes import list_episodes_impl
from ..utils.logging import get_logger, log_with_context
from .components import AppComponents


logger = get_logger("HTTP")

ERROR_BODY = "There was an error, sorry"

Handler = Callable[[Request], Awaitable[Response]]


def handle_errors(handler: Handler) -> Handler:
    """Log any failure server-side and answer with a fixed error body."""

    @functools.wraps(handler)
    async def wrapper(request: Request) -> Response:
        start_time = time.time()
        try:
            return await handler(request)
        except (ValidationError, DecodeError) as e:
            log_with_context(
                logger,
                logging.WARNING,
                "Rejected malformed request",
                context={"path": request.url.path, "error_type": type(e).__name__, "error": str(e)},
                execution_time_ms=(time.time() - start_time) * 1000,
            )
            return PlainTextResponse(ERROR_BODY, status_code=400)
        except Exception as e:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={
                    "context": {
                        "path": request.url.path,
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                    "execution_time_ms": (time.time() - start_time) * 1000,
                },
            )
            return PlainTextResponse(ERROR_BODY, status_code=500)

    return wrapper


def _client_address(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def create_app(components: AppComponents, name: str = "GopherPods") -> FastMCP:
    """
    Build the server with every route and tool bound to ``components``.

    Blocking store and network calls run in Starlette's threadpool so one
    slow request does not hold up the others.
    """
    mcp = FastMCP(name)
    cache = components.cache
    workflow = components.workflow
    renderer = components.renderer
    feed_config = components.config.feed

    def page(template: str, **context) -> HTMLResponse:
        return HTMLResponse(renderer.render(template, **context))

    async def feed_response(link_source: str) -> Response:
        episodes = await run_in_threadpool(cache.get)
        body = render_rss(synthesize(episodes, feed_config, link_source=link_source))
        return Response(body, media_type=CONTENT_TYPE)

    @mcp.custom_route("/", methods=["GET"])
    @handle_errors
    async def podcasts(request: Request) -> Response:
        order = parse_order(request.query_params.get("order", ""))
        episodes = await run_in_threadpool(cache.get)
        return page("podcasts", podcasts=sort_episodes(episodes, order), order=order)

    @mcp.custom_route("/submit", methods=["GET"])
    @handle_errors
    async def submit_form(request: Request) -> Response:
        return page("submit")

    @mcp.custom_route("/submit/add", methods=["POST"])
    @handle_errors
    async def submit_add(request: Request) -> Response:
        form = await request.form()
        try:
            await run_in_threadpool(workflow.submit, dict(form), _client_address(request))
        except GateFailure:
            return page("failed")
        return page("thanks")

    @mcp.custom_route("/feed", methods=["GET"])
    @handle_errors
    async def feed(request: Request) -> Response:
        return await feed_response(LINK_TO_EPISODE)

    @mcp.custom_route("/podcast/feed", methods=["GET"])
    @handle_errors
    async def podcast_feed(request: Request) -> Response:
        return await feed_response(LINK_TO_MEDIA)

    @mcp.custom_route("/dump", methods=["GET"])
    @handle_errors
    async def dump(request: Request) -> Response:
        episodes = await run_in_threadpool(cache.get)
        oldest_first = sorted(episodes, key=lambda ep: ep.episode_date)
        return JSONResponse([ep.to_dump_dict() for ep in oldest_first])

    @mcp.custom_route("/submissions", methods=["GET"])
    @handle_errors
    async def submissions(request: Request) -> Response:
        pending = await run_in_threadpool(workflow.list_pending)
        return page("submissions", submissions=pending)

    @mcp.custom_route("/submissions/add", methods=["POST"])
    @handle_errors
    async def submissions_add(request: Request) -> Response:
        form = dict(await request.form())
        await run_in_threadpool(workflow.promote, form.get("key", ""), form)
        return page("success")

    @mcp.custom_route("/submissions/del", methods=["POST"])
    @handle_errors
    async def submissions_del(request: Request) -> Response:
        form = await request.form()
        await run_in_threadpool(workflow.reject, form.get("key", ""))
        return page("success")

    @mcp.custom_route("/tasks/email", methods=["GET"])
    @handle_errors
    async def tasks_email(request: Request) -> Response:
        count = await run_in_threadpool(components.sweep.run)
        return PlainTextResponse(f"{count} pending")

    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> Response:
        return PlainTextResponse("OK")

    @mcp.tool()
    async def list_episodes(order: str = "date") -> str:
        """
        List every catalog episode.

        Args:
            order: "date" (newest first), "show" or "title"

        Returns:
            JSON string with the episodes
        """
        return await list_episodes_impl(order, cache)

    @mcp.tool()
    async def get_episode_by_id(episode_id: int) -> str:
        """
        Get one catalog episode by its numeric id.

        Args:
            episode_id: Episode id as shown in the dump and tool output

        Returns:
            JSON string with episode details or error message
        """
        return await get_episode_by_id_impl(episode_id, cache)

    return mcp

"""Streamable HTTP transport for the Squiggle MCP Server.

This module serves MCP over plain HTTP POST requests for network/Docker
environments. Every request is its own ephemeral session: a fresh server core
and a fresh session-less transport are built for it and torn down once the
response has been sent, so no state can leak between requests.
"""

import logging
import sys
from collections.abc import Callable
from functools import partial
from typing import Any

import anyio
import uvicorn
from mcp.server.streamable_http import StreamableHTTPServerTransport
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.types import Message, Receive, Scope, Send

from squiggle_mcp.core import SquiggleMCPServerCore
from squiggle_mcp.evaluator import (
    NodeSquiggleEvaluator,
    SquiggleEvaluator,
    warn_if_bridge_missing,
)
from squiggle_mcp.settings import Settings, settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("squiggle_mcp.http")

MCP_PATH = "/mcp"

METHOD_NOT_ALLOWED_CODE = -32000
INTERNAL_ERROR_CODE = -32603

METHOD_NOT_ALLOWED_BODY = {
    "jsonrpc": "2.0",
    "error": {"code": METHOD_NOT_ALLOWED_CODE, "message": "Method not allowed."},
    "id": None,
}
INTERNAL_ERROR_BODY = {
    "jsonrpc": "2.0",
    "error": {"code": INTERNAL_ERROR_CODE, "message": "Internal server error"},
    "id": None,
}

Session = tuple[SquiggleMCPServerCore, StreamableHTTPServerTransport]


def create_session(evaluator: SquiggleEvaluator, json_response: bool = False) -> Session:
    """Build an isolated ``(server, transport)`` pair for a single HTTP request."""
    core = SquiggleMCPServerCore(evaluator=evaluator, expose_resources=True)
    transport = StreamableHTTPServerTransport(
        mcp_session_id=None,
        is_json_response_enabled=json_response,
    )
    return core, transport


class MCPEndpoint:
    """ASGI endpoint for ``/mcp``.

    POST requests are served by a per-request session; every other method gets
    a JSON-RPC "method not allowed" envelope without building anything.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self.session_factory = session_factory

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["method"] != "POST":
            logger.debug("Rejecting %s %s", scope["method"], scope["path"])
            response = JSONResponse(
                METHOD_NOT_ALLOWED_BODY, status_code=405, headers={"Allow": "POST"}
            )
            await response(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self._serve(scope, receive, tracking_send)
        except Exception:
            logger.error("Error handling MCP request", exc_info=True)
            if response_started:
                return
            response = JSONResponse(INTERNAL_ERROR_BODY, status_code=500)
            await response(scope, receive, send)

    async def _serve(self, scope: Scope, receive: Receive, send: Send) -> None:
        core, transport = self.session_factory()

        async def run_server(*, task_status: Any = anyio.TASK_STATUS_IGNORED) -> None:
            async with transport.connect() as (read_stream, write_stream):
                task_status.started()
                await core.app.run(
                    read_stream,
                    write_stream,
                    core.app.create_initialization_options(),
                    stateless=True,
                )

        async with anyio.create_task_group() as tg:
            await tg.start(run_server)
            try:
                await transport.handle_request(scope, receive, send)
            finally:
                logger.debug("Request closed, releasing transport and server")
                await transport.terminate()
                tg.cancel_scope.cancel()


def create_app(
    config: Settings = settings, evaluator: SquiggleEvaluator | None = None
) -> Starlette:
    """Create a Starlette app serving ``/mcp`` and ``/health``."""
    evaluator = evaluator or NodeSquiggleEvaluator.from_settings(config)
    endpoint = MCPEndpoint(partial(create_session, evaluator, config.json_response))

    routes = [
        Route(MCP_PATH, endpoint=endpoint),
        Route("/health", endpoint=lambda r: Response("OK", status_code=200)),
    ]

    return Starlette(routes=routes)


def run_server(config: Settings = settings) -> None:
    """Run the MCP server with streamable HTTP transport."""

    app = create_app(config)
    logger.info(f"MCP server listening on http://{config.host}:{config.port}{MCP_PATH}")
    # In-flight requests are not drained on shutdown.
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        timeout_graceful_shutdown=0,
    )


def main() -> None:
    """Entry point for the HTTP server."""
    try:
        logger.info("Starting Squiggle MCP Server")
        logger.info(f"Version: {settings.version}")
        logger.info(f"Host: {settings.host}, Port: {settings.port}")
        warn_if_bridge_missing(NodeSquiggleEvaluator.from_settings(settings))

        run_server(settings)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=settings.debug)
        sys.exit(1)


if __name__ == "__main__":
    main()

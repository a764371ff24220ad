"""Transport-agnostic core implementation of the Squiggle MCP server.
Each transport layer only needs to:

1. instantiate `SquiggleMCPServerCore`
2. expose its `app` through the chosen I/O mechanism.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from squiggle_mcp import resources as resource_catalogue
from squiggle_mcp import tools as tool_catalogue
from squiggle_mcp.evaluator import NodeSquiggleEvaluator, SquiggleEvaluator
from squiggle_mcp.formatter import format_outcome
from squiggle_mcp.schema import RunSquiggleRequest
from squiggle_mcp.settings import settings

logger = logging.getLogger("squiggle_mcp.core")

INTERNAL_ERROR_TEXT = "Error: internal error while evaluating Squiggle code."

_Handler = Callable[[Any], Awaitable[str]]


class SquiggleMCPServerCore:  # noqa: D101
    def __init__(
        self, evaluator: SquiggleEvaluator | None = None, expose_resources: bool = False
    ) -> None:
        self.evaluator: SquiggleEvaluator = evaluator or NodeSquiggleEvaluator()
        self.expose_resources = expose_resources
        self.app = Server("squiggle", version=settings.version)

        @self.app.list_tools()
        async def _list_tools() -> list[Tool]:
            return await self.list_tools()

        # Arguments are validated by the request models in call_tool, not by the SDK.
        @self.app.call_tool(validate_input=False)
        async def _call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            return await self.call_tool(name, arguments)

        if expose_resources:

            @self.app.list_resources()
            async def _list_resources() -> list[Resource]:
                return await self.list_resources()

            @self.app.read_resource()
            async def _read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
                return await self.read_resource(uri)

        self._function_map: dict[str, _Handler] = {
            tool_catalogue.RUN_SQUIGGLE: self._handle_run_squiggle,
        }

    # ---------------------------------------------------------------------
    # Public API used by transports
    # ---------------------------------------------------------------------

    async def list_tools(self) -> list[Tool]:
        return tool_catalogue.get_tools()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Validate *arguments* and dispatch to the proper *tool* handler."""

        logger.debug("Tool call %s with args %s", name, arguments)

        handler = self._function_map.get(name)
        if not handler:
            logger.warning("Unknown tool: %s", name)
            return [
                TextContent(
                    type="text",
                    text=json.dumps({"error": f"Unknown tool: {name}"}),
                )
            ]

        model_cls = tool_catalogue.get_request_model(name)
        try:
            request_model = model_cls(**(arguments or {}))  # type: ignore[misc]
        except Exception as exc:
            logger.error("Validation error for tool %s: %s", name, exc, exc_info=settings.debug)
            return [
                TextContent(
                    type="text",
                    text=json.dumps({"error": f"Invalid arguments for {name}: {exc}"}),
                )
            ]

        text = await handler(request_model)
        return [TextContent(type="text", text=text)]

    async def list_resources(self) -> list[Resource]:
        if not self.expose_resources:
            return []
        return resource_catalogue.get_resources()

    async def read_resource(self, uri: AnyUrl | str) -> list[ReadResourceContents]:
        """Return the contents of the resource at *uri*.

        Raises:
            ValueError: If *uri* is not a published resource.
        """
        if not self.expose_resources or str(uri) != resource_catalogue.EXAMPLE_URI:
            raise ValueError(f"Unknown resource: {uri}")
        return [
            ReadResourceContents(
                content=resource_catalogue.read_example(),
                mime_type=resource_catalogue.EXAMPLE_MIME_TYPE,
            )
        ]

    # ------------------------------------------------------------------
    # Handlers (internal)
    # ------------------------------------------------------------------

    async def _handle_run_squiggle(self, params: RunSquiggleRequest) -> str:
        logger.debug("Handling run-squiggle (summary=%s)", params.summary_requested)

        try:
            outcome = await self.evaluator.evaluate(params.code)
        except Exception as exc:
            logger.error("Evaluator failed: %s", exc, exc_info=settings.debug)
            stderr = getattr(exc, "stderr", None)
            if stderr:
                logger.debug("Evaluator stderr:\n%s", stderr)
            return INTERNAL_ERROR_TEXT

        return format_outcome(outcome, params.summary_requested)

"""Integration layer between the Squiggle *transport-agnostic* core and the upstream FastMCP
server implementation.

The stock FastMCP class provides the full MCP protocol plumbing (handshake,
stream management, etc.) but knows nothing about our domain-specific tool.

This adapter subclasses FastMCP so we can plug in our :class:`~squiggle_mcp.core.SquiggleMCPServerCore`
implementation while still re-using all the upstream functionality.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from squiggle_mcp.core import SquiggleMCPServerCore

logger = logging.getLogger("squiggle_mcp.fastmcp_adapter")


class SquiggleFastMCP(FastMCP):
    """FastMCP subclass that delegates *tool* and *resource* handling to the core."""

    def __init__(self, core: SquiggleMCPServerCore, *args: Any, **kwargs: Any) -> None:  # noqa: D401
        """Create a FastMCP server wired up to *core*.

        Parameters
        ----------
        core
            The transport-agnostic server core responsible for the actual
            business logic (validation, evaluation, formatting).
        *args, **kwargs
            Forwarded verbatim to :class:`~mcp.server.fastmcp.FastMCP`.
        """

        self._core = core
        super().__init__(*args, **kwargs)

    # ------------------------------------------------------------------
    # MCP protocol handlers: override the built-in FastMCP implementations
    # so they forward to ``SquiggleMCPServerCore`` instead of the internal
    # tool and resource managers. The core remains single source of truth.
    # ------------------------------------------------------------------

    async def list_tools(self) -> list[Tool]:  # type: ignore[override]
        """Return the list of tools exposed by the Squiggle server."""
        return await self._core.list_tools()

    async def call_tool(  # type: ignore[override]
        self, name: str, arguments: dict[str, Any]
    ) -> Sequence[TextContent]:
        """Validate arguments & dispatch *name* via the server core."""
        return await self._core.call_tool(name, arguments)

    async def list_resources(self) -> list[Resource]:  # type: ignore[override]
        return await self._core.list_resources()

    async def read_resource(self, uri: AnyUrl | str) -> Iterable[ReadResourceContents]:  # type: ignore[override]
        return await self._core.read_resource(uri)

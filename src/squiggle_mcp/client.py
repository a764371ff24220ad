"""MCP client example implementation for connecting to the Squiggle MCP Server over HTTP.

This module provides a client to interact with the MCP server using the
streamable HTTP transport.

This is a simplified example implementation for testing purposes.
"""

import logging
from contextlib import AsyncExitStack
from typing import Any

from mcp.client.session import ClientSession
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import TextResourceContents
from pydantic import AnyUrl

from squiggle_mcp.resources import EXAMPLE_URI
from squiggle_mcp.tools import RUN_SQUIGGLE

logger = logging.getLogger("squiggle_mcp.client")


class SquiggleMCPClient:
    """Client for interacting with the Squiggle MCP Server via streamable HTTP."""

    def __init__(self, server_url: str = "http://localhost:3000/mcp"):
        """Initialize the MCP client.

        Args:
            server_url: URL of the MCP endpoint of the server
        """
        self.server_url = server_url
        self.session: ClientSession | None = None
        self.exit_stack = AsyncExitStack()
        self.connected = False

    async def connect(self) -> None:
        """Connect to the MCP server."""
        try:
            logger.info(f"Connecting to MCP server at {self.server_url}")

            read_stream, write_stream, _ = await self.exit_stack.enter_async_context(
                streamablehttp_client(self.server_url)
            )
            self.session = await self.exit_stack.enter_async_context(
                ClientSession(read_stream, write_stream)
            )

            await self.session.initialize()

            self.connected = True
            logger.info("Successfully connected to MCP server")
        except Exception as e:
            logger.error(f"Failed to connect to MCP server: {e}")
            await self.disconnect()
            raise

    async def disconnect(self) -> None:
        """Disconnect from the MCP server."""
        try:
            logger.info("Disconnecting from MCP server")
            await self.exit_stack.aclose()
        except Exception as e:
            logger.error(f"Error during disconnection: {e}")
        finally:
            self.exit_stack = AsyncExitStack()
            self.session = None
            self.connected = False

    async def _ensure_connected(self) -> None:
        """Ensure the client is connected to the server."""
        if not self.connected or self.session is None:
            raise RuntimeError("Client is not connected to the MCP server")

    async def list_tools(self) -> list[dict[str, Any]]:
        """List available tools from the MCP server.

        Returns:
            List of available tools with their details
        """
        await self._ensure_connected()
        assert self.session is not None

        response = await self.session.list_tools()

        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.inputSchema,
            }
            for tool in response.tools
        ]

    async def run_squiggle(self, code: str, render_summary: bool = False) -> str:
        """Run Squiggle code on the server.

        Args:
            code: Squiggle source to evaluate
            render_summary: Return only the ``summary`` binding, one item per line

        Returns:
            The text the tool produced
        """
        await self._ensure_connected()
        assert self.session is not None

        response = await self.session.call_tool(
            RUN_SQUIGGLE,
            {"code": code, "render_summary": "true" if render_summary else "false"},
        )

        text_content = next((item for item in response.content if item.type == "text"), None)
        if not text_content:
            raise ValueError("No text content found in the tool response")

        return text_content.text  # type: ignore[union-attr]

    async def read_example(self) -> str:
        """Fetch the example Squiggle program published by the server."""
        await self._ensure_connected()
        assert self.session is not None

        response = await self.session.read_resource(AnyUrl(EXAMPLE_URI))
        for contents in response.contents:
            if isinstance(contents, TextResourceContents):
                return contents.text

        raise ValueError("No text contents found in the resource response")

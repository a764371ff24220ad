"""StdIO transport for the Squiggle MCP Server.

This module provides a dedicated implementation of the MCP server using
Standard I/O (stdio) transport for CLI environments. One server instance
lives for the whole process.
"""

import asyncio
import logging
import sys

from squiggle_mcp.core import SquiggleMCPServerCore
from squiggle_mcp.evaluator import (
    NodeSquiggleEvaluator,
    SquiggleEvaluator,
    warn_if_bridge_missing,
)
from squiggle_mcp.settings import Settings, settings

from squiggle_mcp.fastmcp_adapter import SquiggleFastMCP  # noqa: E501  # isort: skip

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("squiggle_mcp.stdio")


class StdioMCPServer:
    """MCP server implementation with stdio transport for CLI environments."""

    def __init__(
        self, config: Settings = settings, evaluator: SquiggleEvaluator | None = None
    ) -> None:
        """Initialize the stdio-based MCP server."""
        self.core = SquiggleMCPServerCore(
            evaluator=evaluator or NodeSquiggleEvaluator.from_settings(config),
            expose_resources=config.expose_example_resource,
        )

        self.mcp = SquiggleFastMCP(self.core, name="squiggle")

    async def run(self) -> None:
        """Run the stdio server."""
        await self.mcp.run_stdio_async()


def main() -> None:
    """Entry point for the stdio server."""
    try:
        logger.info("Starting Squiggle MCP Server with stdio transport")
        logger.info(f"Version: {settings.version}")
        logger.debug(f"Python version: {sys.version}")
        logger.debug(f"Node executable: {settings.node_executable}")
        warn_if_bridge_missing(NodeSquiggleEvaluator.from_settings(settings))
        asyncio.run(StdioMCPServer(settings).run())

    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

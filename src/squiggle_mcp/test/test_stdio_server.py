"""Tests for the stdio host wiring and its process exit behaviour."""

import logging
from typing import Any
from unittest.mock import patch

import pytest

from squiggle_mcp import stdio_server
from squiggle_mcp.resources import EXAMPLE_URI
from squiggle_mcp.settings import settings
from squiggle_mcp.stdio_server import StdioMCPServer

logger = logging.getLogger("squiggle_mcp_tests")


@pytest.mark.asyncio
async def test_fastmcp_adapter_delegates_tools_to_core(fake_evaluator: Any) -> None:
    server = StdioMCPServer(settings, evaluator=fake_evaluator)

    tools = await server.mcp.list_tools()
    assert [tool.name for tool in tools] == ["run-squiggle"]

    result = await server.mcp.call_tool("run-squiggle", {"code": "x = 2"})
    assert result[0].text.startswith("x: 2")
    assert fake_evaluator.calls == ["x = 2"]


@pytest.mark.asyncio
async def test_stdio_resources_follow_settings(fake_evaluator: Any) -> None:
    hidden = StdioMCPServer(
        settings.model_copy(update={"expose_example_resource": False}), evaluator=fake_evaluator
    )
    shown = StdioMCPServer(
        settings.model_copy(update={"expose_example_resource": True}), evaluator=fake_evaluator
    )

    assert await hidden.mcp.list_resources() == []
    assert [str(r.uri) for r in await shown.mcp.list_resources()] == [EXAMPLE_URI]
    contents = list(await shown.mcp.read_resource(EXAMPLE_URI))
    assert contents[0].mime_type == "text/plain"


def test_main_exits_non_zero_on_startup_error() -> None:
    def _fail(coro: Any) -> None:
        coro.close()
        raise RuntimeError("transport could not connect")

    with (
        patch.object(stdio_server, "warn_if_bridge_missing"),
        patch.object(stdio_server.asyncio, "run", side_effect=_fail),
    ):
        with pytest.raises(SystemExit) as excinfo:
            stdio_server.main()

    assert excinfo.value.code == 1


def test_main_treats_interrupt_as_clean_stop() -> None:
    def _interrupt(coro: Any) -> None:
        coro.close()
        raise KeyboardInterrupt

    with (
        patch.object(stdio_server, "warn_if_bridge_missing"),
        patch.object(stdio_server.asyncio, "run", side_effect=_interrupt),
    ):
        stdio_server.main()

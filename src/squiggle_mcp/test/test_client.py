"""Unit tests for the example MCP client."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp.types import CallToolResult, ReadResourceResult, TextContent, TextResourceContents
from pydantic import AnyUrl

from squiggle_mcp.client import SquiggleMCPClient
from squiggle_mcp.resources import EXAMPLE_CODE, EXAMPLE_URI


def _connected_client(session: MagicMock) -> SquiggleMCPClient:
    client = SquiggleMCPClient("http://testserver/mcp")
    client.session = session
    client.connected = True
    return client


@pytest.mark.asyncio
async def test_client_requires_connection() -> None:
    client = SquiggleMCPClient()

    assert client.server_url == "http://localhost:3000/mcp"
    with pytest.raises(RuntimeError, match="not connected"):
        await client.run_squiggle("1 + 1")


@pytest.mark.asyncio
async def test_run_squiggle_sends_string_flag_and_returns_text() -> None:
    session = MagicMock()
    session.call_tool = AsyncMock(
        return_value=CallToolResult(content=[TextContent(type="text", text="a\nb")])
    )
    client = _connected_client(session)

    text = await client.run_squiggle('summary = ["a", "b"]', render_summary=True)

    assert text == "a\nb"
    session.call_tool.assert_awaited_once_with(
        "run-squiggle", {"code": 'summary = ["a", "b"]', "render_summary": "true"}
    )


@pytest.mark.asyncio
async def test_run_squiggle_defaults_to_generic_rendering() -> None:
    session = MagicMock()
    session.call_tool = AsyncMock(
        return_value=CallToolResult(content=[TextContent(type="text", text="x: 1")])
    )
    client = _connected_client(session)

    await client.run_squiggle("x = 1")

    _, arguments = session.call_tool.call_args.args
    assert arguments["render_summary"] == "false"


@pytest.mark.asyncio
async def test_run_squiggle_without_text_content_raises() -> None:
    session = MagicMock()
    session.call_tool = AsyncMock(return_value=CallToolResult(content=[]))
    client = _connected_client(session)

    with pytest.raises(ValueError, match="No text content"):
        await client.run_squiggle("x = 1")


@pytest.mark.asyncio
async def test_read_example() -> None:
    session = MagicMock()
    session.read_resource = AsyncMock(
        return_value=ReadResourceResult(
            contents=[
                TextResourceContents(
                    uri=AnyUrl(EXAMPLE_URI), mimeType="text/plain", text=EXAMPLE_CODE
                )
            ]
        )
    )
    client = _connected_client(session)

    assert await client.read_example() == EXAMPLE_CODE


@pytest.mark.asyncio
async def test_disconnect_resets_state() -> None:
    client = _connected_client(MagicMock())

    await client.disconnect()

    assert client.session is None
    assert client.connected is False

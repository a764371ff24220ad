"""Tool catalogue for the Squiggle MCP server."""

from __future__ import annotations

from mcp.types import Tool

from squiggle_mcp.schema import RunSquiggleRequest

RUN_SQUIGGLE = "run-squiggle"


def get_tools() -> list[Tool]:
    """Return the list of MCP *tools* supported by the server."""

    return [
        Tool(
            name=RUN_SQUIGGLE,
            description="Runs Squiggle code and returns the result.",
            inputSchema=RunSquiggleRequest.model_json_schema(),
        ),
    ]


def get_request_model(tool_name: str) -> type | None:
    """Return the Pydantic *request* model class for a given tool.

    Returns ``None`` if the name is unknown.
    """

    mapping: dict[str, type] = {
        RUN_SQUIGGLE: RunSquiggleRequest,
    }

    return mapping.get(tool_name)

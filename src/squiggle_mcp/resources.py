"""Static example resource published alongside the run-squiggle tool."""

from __future__ import annotations

from mcp.types import Resource
from pydantic import AnyUrl

EXAMPLE_URI = "squiggle://examples/basic"
EXAMPLE_MIME_TYPE = "text/plain"

EXAMPLE_CODE = """\
// Monthly coffee budget, with uncertainty on both habits and prices.
cupsPerDay = 1 to 3
pricePerCup = 3 to 6
monthlySpend = cupsPerDay * pricePerCup * 30

// With render_summary set to "true", only this list is returned,
// one item per line.
summary = [
  "Expected monthly spend",
  mean(monthlySpend),
  "90th percentile",
  quantile(monthlySpend, 0.9),
]
"""


def get_resources() -> list[Resource]:
    """Return the list of MCP *resources* published by the server."""

    return [
        Resource(
            uri=AnyUrl(EXAMPLE_URI),
            name="squiggle-example",
            description="Example Squiggle program showing bindings and a summary list",
            mimeType=EXAMPLE_MIME_TYPE,
        ),
    ]


def read_example() -> str:
    return EXAMPLE_CODE

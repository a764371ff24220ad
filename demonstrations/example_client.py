#!/usr/bin/env -S uv run --quiet --script
"""
Example of calling the Squiggle MCP server over HTTP
run it with: uv run squiggle-mcp-http & uv run example_client.py
"""

# /// script
# requires-python = ">=3.13"
# dependencies = [
#    "squiggle-mcp",
# ]
# ///
import asyncio

from squiggle_mcp.client import SquiggleMCPClient

MODEL = """
visitorsPerDay = 200 to 800
conversionRate = 0.01 to 0.04
ordersPerMonth = visitorsPerDay * conversionRate * 30
summary = ["Orders per month (mean)", mean(ordersPerMonth)]
"""


async def main():
    # Assumes the MCP server is already running
    client = SquiggleMCPClient("http://localhost:3000/mcp")
    await client.connect()
    try:
        print("Example program published by the server:")
        print(await client.read_example())

        print("All bindings:")
        print(await client.run_squiggle(MODEL))

        print("Summary only:")
        print(await client.run_squiggle(MODEL, render_summary=True))
    finally:
        await client.disconnect()


if __name__ == "__main__":
    asyncio.run(main())

"""
Stdio transport: MCP framing over stdin/stdout via the mcp SDK's low-level
server. Tool listing and calls are delegated to the shared catalog and
ToolDispatcher.
"""

import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from traffic_mcp.catalog import TOOL_CATALOG
from traffic_mcp.dispatcher import ToolDispatcher
from traffic_mcp.models import ToolFailure, ToolOutcome

SERVER_NAME = "traffic-boy-mcp-server"
SERVER_VERSION = "1.0.0"
READY_MESSAGE = "Traffic MCP Server running on stdio"


class ToolCallError(Exception):
    """Raised from call_tool so the SDK replies with an isError result."""

    def __init__(self, failure: ToolFailure):
        super().__init__(failure.message)
        self.kind = failure.kind


def list_tools() -> list[types.Tool]:
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.to_dict()["inputSchema"])
        for tool in TOOL_CATALOG
    ]


def render_outcome(outcome: ToolOutcome) -> list[types.TextContent]:
    if isinstance(outcome, ToolFailure):
        raise ToolCallError(outcome)
    return [types.TextContent(type="text", text=outcome.text)]


def create_stdio_server(dispatcher: ToolDispatcher) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return list_tools()

    # The dispatcher owns argument validation.
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        return render_outcome(await dispatcher.dispatch(name, arguments))

    return server


async def run_stdio(dispatcher: ToolDispatcher) -> None:
    server = create_stdio_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        print(READY_MESSAGE, file=sys.stderr, flush=True)
        await server.run(read_stream, write_stream, server.create_initialization_options())

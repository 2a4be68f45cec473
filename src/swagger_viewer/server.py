"""MCP server exposing the swagger tools over stdio."""

import mcp.server.stdio
import mcp.types as types
import structlog
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from swagger_viewer import __version__
from swagger_viewer.session import SwaggerSession
from swagger_viewer.tools import ToolDispatcher, ToolResult, ToolSpec

SERVER_NAME = "swagger-viewer"

logger = structlog.get_logger(__name__)


def to_mcp_tool(spec: ToolSpec) -> types.Tool:
    return types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text())],
        isError=result.is_error,
    )


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server whose tool handlers delegate to dispatcher."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [to_mcp_tool(spec) for spec in dispatcher.list_tools()]

    # argument checks stay in the dispatcher so errors use our envelope
    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict | None) -> types.CallToolResult:
        result = await dispatcher.dispatch(name, arguments)
        return to_call_tool_result(result)

    return server


async def run_stdio(session: SwaggerSession) -> None:
    """Serve until stdin closes, then release the session's watcher."""
    server = create_server(ToolDispatcher(session))
    try:
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.info("Swagger Viewer MCP Server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )
    finally:
        session.close()

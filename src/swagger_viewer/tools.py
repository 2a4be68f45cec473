"""Tool declarations and the dispatcher that runs them.

The dispatcher knows nothing about the MCP wire format: it turns a tool name
plus arguments into a ToolResult, which server.py converts for the transport.
"""

import json
from typing import Any

import structlog
from pydantic import BaseModel

from swagger_viewer.errors import MissingArgumentError, SwaggerToolError, UnknownToolError
from swagger_viewer.session import SwaggerSession

INITIALIZE = "mcp_swagger_initialize"
SEARCH = "mcp_swagger_search"
GENERATE_CODE = "mcp_swagger_generate_code"
GET_ALL_ENDPOINTS = "mcp_swagger_get_all_endpoints"

logger = structlog.get_logger(__name__)


class ToolSpec(BaseModel):
    """Name, description and JSON Schema input of one tool."""

    name: str
    description: str
    input_schema: dict


TOOLS: list[ToolSpec] = [
    ToolSpec(
        name=INITIALIZE,
        description="Load the Swagger/OpenAPI document, from swaggerUrl or the ~/swagger.json config",
        input_schema={
            "type": "object",
            "properties": {
                "swaggerUrl": {"type": "string", "description": "URL of the Swagger/OpenAPI JSON document"},
            },
            "required": [],
        },
    ),
    ToolSpec(
        name=SEARCH,
        description="Search API endpoints by keyword",
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search keyword"},
            },
            "required": ["query"],
        },
    ),
    ToolSpec(
        name=GENERATE_CODE,
        description="Generate client code that calls an API endpoint",
        input_schema={
            "type": "object",
            "properties": {
                "path": {"type": "string", "description": "API path, e.g. /users/{id}"},
                "method": {"type": "string", "description": "HTTP method"},
                "language": {"type": "string", "description": "Target language", "default": "javascript"},
            },
            "required": ["path", "method"],
        },
    ),
    ToolSpec(
        name=GET_ALL_ENDPOINTS,
        description="List all available API endpoints",
        input_schema={
            "type": "object",
            "properties": {},
            "required": [],
        },
    ),
]


class ToolResult(BaseModel):
    """Uniform response envelope: an error flag and a JSON-serialisable payload."""

    is_error: bool = False
    payload: Any = None

    def text(self) -> str:
        if isinstance(self.payload, str):
            return self.payload
        return json.dumps(self.payload, ensure_ascii=False)


class ToolDispatcher:
    """Routes tool calls to a SwaggerSession and wraps the outcome."""

    def __init__(self, session: SwaggerSession):
        self.session = session

    def list_tools(self) -> list[ToolSpec]:
        return list(TOOLS)

    async def dispatch(self, name: str, arguments: dict | None = None) -> ToolResult:
        args = arguments or {}
        logger.debug("Tool call", tool=name, arguments=args)
        try:
            payload = await self._call(name, args)
        except SwaggerToolError as e:
            logger.info("Tool call failed", tool=name, error=e.message)
            return ToolResult(is_error=True, payload=e.to_dict())
        except Exception as e:
            logger.exception("Tool call raised", tool=name)
            return ToolResult(is_error=True, payload=f"Error: {e}")
        return ToolResult(payload=payload)

    async def _call(self, name: str, args: dict) -> Any:
        if name == INITIALIZE:
            return await self.session.initialize(_optional_str(args, "swaggerUrl"))
        if name == SEARCH:
            query = _optional_str(args, "query")
            if not query:
                raise MissingArgumentError("Query is required")
            return await self.session.search(query)
        if name == GENERATE_CODE:
            path = _optional_str(args, "path")
            method = _optional_str(args, "method")
            if not path or not method:
                raise MissingArgumentError("Path and method are required")
            language = _optional_str(args, "language") or "javascript"
            return await self.session.generate_code(path, method, language)
        if name == GET_ALL_ENDPOINTS:
            return await self.session.get_all_endpoints()
        raise UnknownToolError(name)


def _optional_str(args: dict, key: str) -> str | None:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MissingArgumentError(f"{key} must be a string")
    return value

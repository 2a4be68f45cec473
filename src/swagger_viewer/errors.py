"""Errors surfaced to tool callers."""

from typing import Any


class SwaggerToolError(Exception):
    """Base exception for tool errors; the message is shown to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Payload for the error envelope."""
        return {"error": self.message}


class MissingArgumentError(SwaggerToolError):
    """A required tool argument was absent or empty."""


class EndpointNotFoundError(SwaggerToolError):
    """The requested path/method is not in the cached document."""

    def __init__(self, path: str, method: str) -> None:
        super().__init__("Endpoint not found")
        self.path = path
        self.method = method

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "path": self.path, "method": self.method}


class DocumentUnavailableError(SwaggerToolError):
    """The document could not be fetched, parsed or validated."""

    def __init__(self, url: str) -> None:
        super().__init__("Failed to fetch swagger documentation")
        self.url = url

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.message, "swaggerUrl": self.url}


class UnknownToolError(SwaggerToolError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name

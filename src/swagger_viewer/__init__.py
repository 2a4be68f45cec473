"""Swagger Viewer — search, list and generate client code for OpenAPI endpoints over MCP."""

__version__ = "1.0.0"

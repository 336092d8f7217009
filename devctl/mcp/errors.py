"""MCP registration errors."""

from __future__ import annotations

from devctl.core.errors import DevctlError


class McpError(DevctlError):
    """Base class for MCP client configuration errors."""


class McpConfigError(McpError):
    """The client's config file cannot be read, parsed, or written."""


class McpServerExistsError(McpError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"MCP server '{name}' already exists")


class McpServerNotFoundError(McpError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"MCP server '{name}' not found")

"""MCP server registration for client applications."""

from devctl.mcp.clients import McpClient, get_client, list_clients
from devctl.mcp.errors import McpConfigError, McpError, McpServerExistsError, McpServerNotFoundError
from devctl.mcp.models import McpConfig, McpServer

__all__ = [
    "McpClient",
    "McpConfig",
    "McpConfigError",
    "McpError",
    "McpServer",
    "McpServerExistsError",
    "McpServerNotFoundError",
    "get_client",
    "list_clients",
]

"""
MCP clients — applications whose config files hold MCP server entries.

Each client knows where its config file lives on each platform; reading
and writing is shared.  Clients are looked up by ID from an explicit
table (``get_client``).
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from devctl.core.services.detection import PLATFORM_DARWIN, PLATFORM_WINDOWS, current_platform
from devctl.mcp.config_file import read_mcp_config, write_mcp_config
from devctl.mcp.errors import McpConfigError, McpError, McpServerExistsError, McpServerNotFoundError
from devctl.mcp.models import McpServer

logger = logging.getLogger(__name__)


class McpClient(ABC):
    """A client application with an ``mcpServers`` config file."""

    def __init__(self, config_path: Path | None = None):
        self._config_path = config_path

    @property
    @abstractmethod
    def name(self) -> str:
        """Client ID used on the command line."""

    @abstractmethod
    def default_config_path(self, platform: str) -> Path:
        """Where the client keeps its config on ``platform``."""

    def config_path(self) -> Path:
        if self._config_path is None:
            self._config_path = self.default_config_path(current_platform())
        return self._config_path

    def list_servers(self) -> list[McpServer]:
        config = read_mcp_config(self.config_path())
        return [McpServer.from_config(name, cfg) for name, cfg in config.mcp_servers.items()]

    def install_server(self, server: McpServer) -> Path | None:
        """Add a server entry. Returns the backup file, if one was made.

        Raises:
            McpServerExistsError: an entry with this name exists.
        """
        path = self.config_path()
        config = read_mcp_config(path)
        if server.name in config.mcp_servers:
            raise McpServerExistsError(server.name)

        config.mcp_servers[server.name] = server.to_config()
        backup = write_mcp_config(path, config)
        logger.info("Installed MCP server %s into %s", server.name, path)
        return backup

    def uninstall_server(self, name: str) -> Path | None:
        """Remove a server entry. Returns the backup file.

        Raises:
            McpServerNotFoundError: no entry with this name.
        """
        path = self.config_path()
        config = read_mcp_config(path)
        if name not in config.mcp_servers:
            raise McpServerNotFoundError(name)

        del config.mcp_servers[name]
        backup = write_mcp_config(path, config)
        logger.info("Uninstalled MCP server %s from %s", name, path)
        return backup

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ClaudeDesktopClient(McpClient):
    """Claude desktop app (``claude_desktop_config.json``)."""

    @property
    def name(self) -> str:
        return "claude-code"

    def default_config_path(self, platform: str) -> Path:
        file_name = "claude_desktop_config.json"
        if platform == PLATFORM_WINDOWS:
            appdata = os.environ.get("APPDATA")
            if not appdata:
                raise McpConfigError("APPDATA environment variable not set")
            return Path(appdata) / "Claude" / file_name
        if platform == PLATFORM_DARWIN:
            return Path.home() / "Library" / "Application Support" / "Claude" / file_name
        return Path.home() / ".config" / "claude" / file_name


class CursorClient(McpClient):
    """Cursor editor (user-level ``~/.cursor/mcp.json``)."""

    @property
    def name(self) -> str:
        return "cursor"

    def default_config_path(self, platform: str) -> Path:
        return Path.home() / ".cursor" / "mcp.json"


_CLIENTS: dict[str, type[McpClient]] = {
    "claude-code": ClaudeDesktopClient,
    "cursor": CursorClient,
}


def list_clients() -> list[str]:
    return sorted(_CLIENTS)


def get_client(name: str, config_path: Path | None = None) -> McpClient:
    """Instantiate a client by ID, optionally pinned to a config file.

    Raises:
        McpError: unknown client.
    """
    client_cls = _CLIENTS.get(name)
    if client_cls is None:
        raise McpError(
            f"unsupported MCP client: {name} (supported: {', '.join(list_clients())})"
        )
    return client_cls(config_path=config_path)

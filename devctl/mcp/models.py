"""
MCP models — server entries as stored in client config files.

Client files look like::

    {
      "mcpServers": {
        "context7": {"command": "npx", "args": ["-y", "@upstash/context7-mcp"]}
      },
      ...other client settings, preserved untouched...
    }
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class McpServerConfig(BaseModel):
    """One entry under ``mcpServers`` (the name is the key)."""

    model_config = ConfigDict(extra="allow")

    command: str = ""
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(exclude_defaults=True)


class McpServer(BaseModel):
    """A named MCP server, as shown to and entered by the user."""

    name: str
    command: str = ""
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    url: str = ""

    @property
    def command_line(self) -> str:
        if not self.command:
            return self.url
        return " ".join([self.command, *self.args])

    def to_config(self) -> McpServerConfig:
        extra = {"url": self.url} if self.url else {}
        return McpServerConfig(command=self.command, args=list(self.args), env=dict(self.env), **extra)

    @classmethod
    def from_config(cls, name: str, config: McpServerConfig) -> McpServer:
        url = (config.model_extra or {}).get("url")
        return cls(
            name=name,
            command=config.command,
            args=config.args,
            env=config.env,
            url=url if isinstance(url, str) else "",
        )


class McpConfig(BaseModel):
    """A whole client config file; unknown top-level keys are kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    mcp_servers: dict[str, McpServerConfig] = Field(default_factory=dict, alias="mcpServers")

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True, exclude={"mcp_servers"})
        data["mcpServers"] = {name: cfg.to_json() for name, cfg in self.mcp_servers.items()}
        return data

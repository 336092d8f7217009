"""
CLI commands for MCP server registration.

Thin wrappers over ``devctl.mcp.clients``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devctl.mcp.clients import list_clients


def _client_options(fn):
    fn = click.option(
        "--config-file",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Client config file (default: the client's standard location).",
    )(fn)
    fn = click.option(
        "--mcp-client",
        "client_name",
        type=click.Choice(list_clients()),
        default="claude-code",
        show_default=True,
        help="MCP client whose config to edit.",
    )(fn)
    return fn


def _get_client(client_name: str, config_file: Path | None):
    from devctl.mcp.clients import get_client
    from devctl.mcp.errors import McpError

    try:
        return get_client(client_name, config_path=config_file)
    except McpError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _parse_env(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, str]:
    env: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}")
        env[key] = value
    return env


@click.group()
def mcp() -> None:
    """MCP servers — list, install, uninstall in client configs."""


# ── List ────────────────────────────────────────────────────────


@mcp.command("list")
@_client_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def list_cmd(client_name: str, config_file: Path | None, as_json: bool) -> None:
    """List MCP servers registered in a client."""
    from devctl.mcp.errors import McpError

    client = _get_client(client_name, config_file)
    try:
        servers = client.list_servers()
    except McpError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([s.model_dump() for s in servers], indent=2))
        return

    if not servers:
        click.secho(f"No MCP servers configured for {client.name}", fg="yellow")
        return

    click.secho(f"🔌 MCP servers ({client.name}):", fg="cyan", bold=True)
    for server in servers:
        click.secho(f"   • {server.name}", bold=True, nl=False)
        click.echo(f"  → {server.command_line}")
        for key in sorted(server.env):
            click.echo(f"       {key}=…")


# ── Install / Uninstall ─────────────────────────────────────────


@mcp.command(context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@_client_options
@click.option(
    "--env", "-e", "env",
    multiple=True,
    callback=_parse_env,
    help="Environment variable for the server (KEY=VALUE, repeatable).",
)
def install(
    name: str,
    command: tuple[str, ...],
    client_name: str,
    config_file: Path | None,
    env: dict[str, str],
) -> None:
    """Register an MCP server NAME that runs COMMAND.

    Put the server command after ``--`` so its own flags are not read
    as devctl options.

    Examples:

        devctl mcp install context7 -- npx -y @upstash/context7-mcp

        devctl mcp install github --env GITHUB_TOKEN=xyz -- npx -y @modelcontextprotocol/server-github
    """
    from devctl.mcp.errors import McpError
    from devctl.mcp.models import McpServer

    client = _get_client(client_name, config_file)
    server = McpServer(name=name, command=command[0], args=list(command[1:]), env=env)

    try:
        backup = client.install_server(server)
    except McpError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Installed MCP server {name} for {client.name}", fg="green")
    click.echo(f"   {server.command_line}")
    if backup:
        click.echo(f"   Backup: {backup}")


@mcp.command()
@click.argument("name")
@_client_options
def uninstall(name: str, client_name: str, config_file: Path | None) -> None:
    """Remove the MCP server NAME from a client."""
    from devctl.mcp.errors import McpError

    client = _get_client(client_name, config_file)
    try:
        backup = client.uninstall_server(name)
    except McpError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Uninstalled MCP server {name} from {client.name}", fg="green")
    if backup:
        click.echo(f"   Backup: {backup}")

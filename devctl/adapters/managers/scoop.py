"""
Scoop adapter — the reference package manager implementation.

    scoop install <name>[@<version>]
    scoop uninstall <name>
    scoop export          → {"apps": [{"Name": ..., "Version": ...}, ...]}

Scoop has no structured error channel, so "already installed" and
"not installed" are recognised by matching its stderr text.
"""

from __future__ import annotations

import json
import logging

from devctl.adapters.base import PackageManager, RunContext
from devctl.adapters.shell.command import CommandResult, run_command
from devctl.core.errors import AlreadyInstalledError, ExecutionError, NotInstalledError
from devctl.core.models.package import InstalledPackage

logger = logging.getLogger(__name__)

ALREADY_INSTALLED_MARKERS = ("is already installed",)
NOT_INSTALLED_MARKERS = ("is not installed", "isn't installed")


class ScoopManager(PackageManager):
    """Scoop (Windows) package manager."""

    @property
    def name(self) -> str:
        return "scoop"

    def install(self, ctx: RunContext, name: str, version: str = "") -> None:
        result = self._run(ctx, "install", self.package_spec(name, version))
        if result.ok:
            return
        if _matches(result, ALREADY_INSTALLED_MARKERS):
            raise AlreadyInstalledError(name)
        raise _execution_error(result)

    def uninstall(self, ctx: RunContext, name: str) -> None:
        result = self._run(ctx, "uninstall", name)
        if result.ok:
            return
        if _matches(result, NOT_INSTALLED_MARKERS):
            raise NotInstalledError(name)
        raise _execution_error(result)

    def list_installed(self, ctx: RunContext) -> list[InstalledPackage]:
        result = self._run(ctx, "export")
        if not result.ok:
            raise _execution_error(result)

        try:
            apps = parse_export(result.stdout)
        except ValueError as e:
            raise ExecutionError(
                result.command_line,
                result.returncode,
                result.stderr,
                message=f"unparsable output: {e}",
            ) from e

        logger.debug("scoop reports %d installed app(s)", len(apps))
        return apps

    def _run(self, ctx: RunContext, *args: str) -> CommandResult:
        return run_command(ctx, [self.executable_path, *args])


def parse_export(output: str) -> list[InstalledPackage]:
    """Parse ``scoop export`` JSON into installed packages.

    Older scoop versions print lowercase keys, newer ones capitalised
    keys; both are accepted.  Empty output means nothing is installed.

    Raises:
        ValueError: the output is not a JSON object with an apps list.
    """
    text = output.strip()
    if not text:
        return []

    # Scoop may print warnings before the JSON document
    brace = text.find("{")
    if brace < 0:
        raise ValueError("no JSON object in output")

    data = json.loads(text[brace:])
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    apps = data.get("apps") or []
    if not isinstance(apps, list):
        raise ValueError("'apps' is not a list")

    packages = []
    for app in apps:
        if not isinstance(app, dict):
            continue
        name = app.get("Name", app.get("name", ""))
        if not name:
            continue
        packages.append(InstalledPackage(
            name=name,
            version=app.get("Version", app.get("version", "")) or "",
            description=app.get("Description", app.get("description", "")) or "",
            source="scoop",
        ))
    return packages


def _matches(result: CommandResult, markers: tuple[str, ...]) -> bool:
    # Scoop writes some of its messages to stdout
    text = f"{result.stderr}\n{result.stdout}".lower()
    return any(marker in text for marker in markers)


def _execution_error(result: CommandResult) -> ExecutionError:
    return ExecutionError(result.command_line, result.returncode, result.stderr)

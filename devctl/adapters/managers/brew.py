"""
Homebrew adapter — line-based listing.

    brew install <name>[@<version>]
    brew uninstall <name>
    brew list --versions  → "git 2.40.0\nnode 18.0.0 20.1.0\n"

When several versions of a formula are installed side by side, the
last one listed is taken as the installed version.
"""

from __future__ import annotations

import logging

from devctl.adapters.base import PackageManager, RunContext
from devctl.adapters.shell.command import CommandResult, run_command
from devctl.core.errors import AlreadyInstalledError, ExecutionError, NotInstalledError
from devctl.core.models.package import InstalledPackage

logger = logging.getLogger(__name__)

ALREADY_INSTALLED_MARKERS = ("is already installed",)
NOT_INSTALLED_MARKERS = ("no such keg", "is not installed")


class BrewManager(PackageManager):
    """Homebrew (macOS / Linux) package manager."""

    @property
    def name(self) -> str:
        return "brew"

    def install(self, ctx: RunContext, name: str, version: str = "") -> None:
        result = self._run(ctx, "install", self.package_spec(name, version))
        if result.ok:
            return
        stderr = result.stderr.lower()
        if any(marker in stderr for marker in ALREADY_INSTALLED_MARKERS):
            raise AlreadyInstalledError(name)
        raise ExecutionError(result.command_line, result.returncode, result.stderr)

    def uninstall(self, ctx: RunContext, name: str) -> None:
        result = self._run(ctx, "uninstall", name)
        if result.ok:
            return
        stderr = result.stderr.lower()
        if any(marker in stderr for marker in NOT_INSTALLED_MARKERS):
            raise NotInstalledError(name)
        raise ExecutionError(result.command_line, result.returncode, result.stderr)

    def list_installed(self, ctx: RunContext) -> list[InstalledPackage]:
        result = self._run(ctx, "list", "--versions")
        if not result.ok:
            raise ExecutionError(result.command_line, result.returncode, result.stderr)
        packages = parse_list_versions(result.stdout)
        logger.debug("brew reports %d installed formula(e)", len(packages))
        return packages

    def _run(self, ctx: RunContext, *args: str) -> CommandResult:
        return run_command(ctx, [self.executable_path, *args])


def parse_list_versions(output: str) -> list[InstalledPackage]:
    """Parse ``brew list --versions`` output. Blank lines are ignored."""
    packages = []
    for line in output.splitlines():
        parts = line.split()
        if not parts:
            continue
        packages.append(InstalledPackage(
            name=parts[0],
            version=parts[-1] if len(parts) > 1 else "",
            source="brew",
        ))
    return packages

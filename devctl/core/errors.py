"""
Error taxonomy — every failure devctl can surface.

Per-package errors (``PackageManagerError`` and subclasses) are caught
by the reconciler and turned into outcomes.  Everything else is fatal
to the run and propagates to the CLI, which prints it and exits 1.
"""

from __future__ import annotations


class DevctlError(Exception):
    """Base class for all devctl errors."""


class ManifestError(DevctlError):
    """Raised when a manifest file is unreadable, malformed, or empty."""


class ConfigIOError(DevctlError):
    """Raised when the configuration file cannot be read or written."""


class ManagerNotConfiguredError(DevctlError):
    """Raised in strict mode when a manifest references an unregistered manager."""

    def __init__(self, manager_ids: list[str]):
        self.manager_ids = manager_ids
        names = ", ".join(manager_ids)
        super().__init__(
            f"package manager(s) not configured: {names}. Run 'devctl init' first."
        )


# ── Package manager operations ──────────────────────────────────


class PackageManagerError(DevctlError):
    """Base for errors raised by a package manager adapter."""


class ExecutionError(PackageManagerError):
    """The package manager command failed.

    Carries the command line, exit code and captured stderr so the
    user sees what the underlying tool actually said.
    """

    def __init__(
        self,
        cmd: str,
        returncode: int | None = None,
        stderr: str = "",
        message: str = "",
    ):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = message or (
            f"exit code {returncode}" if returncode is not None else "failed"
        )
        text = f"command failed: {cmd}: {detail}"
        if self.stderr:
            text += f"\nstderr: {self.stderr}"
        super().__init__(text)


class AlreadyInstalledError(PackageManagerError):
    """The package manager reported the package is already installed."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"package already installed: {name}")


class NotInstalledError(PackageManagerError):
    """The package manager reported the package is not installed."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"package not installed: {name}")


# ── Cancellation ────────────────────────────────────────────────


class OperationCancelledError(DevctlError):
    """The run context was cancelled while a command was running."""

    def __init__(self, cmd: str, message: str = "cancelled"):
        self.cmd = cmd
        super().__init__(f"{message}: {cmd}")


class OperationTimeoutError(OperationCancelledError):
    """The run context deadline passed while a command was running."""

    def __init__(self, cmd: str, timeout: float | None = None):
        self.timeout = timeout
        label = f"timed out after {timeout:g}s" if timeout else "timed out"
        super().__init__(cmd, message=label)

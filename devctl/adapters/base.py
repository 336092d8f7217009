"""
Adapter base — the contract between the reconciler and package managers.

The reconciler only talks to package managers through this interface,
never directly to their command-line tools.  Each adapter is bound to
one resolved executable path.

Unlike receipts-based adapters, package manager adapters DO raise:
``AlreadyInstalledError`` / ``NotInstalledError`` for benign no-ops,
``ExecutionError`` for real failures, and ``OperationCancelledError``
when the run context is cancelled.  The reconciler decides what each
of those means for the batch.
"""

from __future__ import annotations

import shutil
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from devctl.core.models.package import InstalledPackage


@dataclass
class RunContext:
    """Cancellation and deadline for external process invocations.

    One context is shared by every command of a run.  ``cancel()`` may be
    called from another thread (e.g. a signal handler); running commands
    notice it within one poll interval and terminate their child.
    """

    timeout: float | None = None
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _deadline: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.timeout is not None:
            if self.timeout <= 0:
                raise ValueError("timeout must be positive")
            self._deadline = time.monotonic() + self.timeout

    def cancel(self) -> None:
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None if unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())


class PackageManager(ABC):
    """Abstract base class for package manager adapters.

    To add a package manager:
        1. Subclass PackageManager
        2. Implement name, install, uninstall, list_installed
        3. Add it to ``MANAGER_FACTORIES`` in the registry
    """

    def __init__(self, executable_path: str | None = None):
        self._executable_path = executable_path or self.default_executable

    @property
    @abstractmethod
    def name(self) -> str:
        """The manager identifier used in manifests (e.g. 'scoop')."""

    @property
    def default_executable(self) -> str:
        """Executable to use when no path is configured."""
        return self.name

    @property
    def executable_path(self) -> str:
        return self._executable_path

    def is_available(self) -> bool:
        """Whether the configured executable exists. Never raises."""
        path = Path(self._executable_path)
        if path.is_absolute():
            return path.is_file()
        return shutil.which(self._executable_path) is not None

    def package_spec(self, name: str, version: str = "") -> str:
        """The install argument for a package (``name@version``)."""
        return f"{name}@{version}" if version else name

    @abstractmethod
    def list_installed(self, ctx: RunContext) -> list[InstalledPackage]:
        """List installed packages.

        An empty list is valid.

        Raises:
            ExecutionError: the command failed or its output is unparsable.
        """

    @abstractmethod
    def install(self, ctx: RunContext, name: str, version: str = "") -> None:
        """Install a package, pinned to ``version`` if given.

        Raises:
            AlreadyInstalledError: the manager says it is already installed.
            ExecutionError: any other failure.
        """

    @abstractmethod
    def uninstall(self, ctx: RunContext, name: str) -> None:
        """Uninstall a package.

        Raises:
            NotInstalledError: the manager says it is not installed.
            ExecutionError: any other failure.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} path={self._executable_path!r}>"

"""
Mock package manager — recording test double.

Keeps an in-memory installed set, records every call in order, and
can be told to fail specific operations.  Used by the reconciler tests
and by ``devctl import --mock``.
"""

from __future__ import annotations

from devctl.adapters.base import PackageManager, RunContext
from devctl.core.errors import (
    AlreadyInstalledError,
    ExecutionError,
    NotInstalledError,
    PackageManagerError,
)
from devctl.core.models.package import InstalledPackage


class MockPackageManager(PackageManager):
    """In-memory package manager.

    By default every operation succeeds and mutates the installed set.
    ``call_log`` holds ``(operation, argument)`` tuples, e.g.
    ``("install", "git@2.40.0")``.
    """

    def __init__(
        self,
        manager_name: str = "mock",
        installed: list[InstalledPackage] | None = None,
        available: bool = True,
    ):
        super().__init__(executable_path=manager_name)
        self._name = manager_name
        self._available = available
        self._installed: dict[str, InstalledPackage] = {
            pkg.name: pkg for pkg in installed or []
        }
        self._failures: dict[tuple[str, str], PackageManagerError] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """All operations this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls(self, operation: str) -> list[str]:
        """Arguments of every call to one operation."""
        return [arg for op, arg in self._call_log if op == operation]

    @property
    def installed(self) -> dict[str, InstalledPackage]:
        return self._installed

    def is_available(self) -> bool:
        return self._available

    def set_failure(
        self,
        operation: str,
        name: str = "",
        error: PackageManagerError | None = None,
    ) -> None:
        """Make ``operation`` fail for package ``name`` ('' = list)."""
        self._failures[(operation, name)] = error or ExecutionError(
            f"{self._name} {operation} {name}".strip(), 1, "mock failure"
        )

    def list_installed(self, ctx: RunContext) -> list[InstalledPackage]:
        self._call_log.append(("list", ""))
        self._raise_if_failing("list", "")
        return list(self._installed.values())

    def install(self, ctx: RunContext, name: str, version: str = "") -> None:
        self._call_log.append(("install", self.package_spec(name, version)))
        self._raise_if_failing("install", name)
        if name in self._installed:
            raise AlreadyInstalledError(name)
        self._installed[name] = InstalledPackage(name=name, version=version, source=self._name)

    def uninstall(self, ctx: RunContext, name: str) -> None:
        self._call_log.append(("uninstall", name))
        self._raise_if_failing("uninstall", name)
        if name not in self._installed:
            raise NotInstalledError(name)
        del self._installed[name]

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()

    def _raise_if_failing(self, operation: str, name: str) -> None:
        error = self._failures.get((operation, name))
        if error is not None:
            raise error

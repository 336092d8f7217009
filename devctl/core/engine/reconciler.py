"""
Reconciler — converge installed packages toward a manifest.

For every desired package, in manifest order:

    invalid                      → skipped ("invalid")
    manager not in registry      → skipped ("manager not configured")
    not installed                → install
    installed, same version      → skipped ("already satisfied")
    installed, other version     → uninstall, then install

Per-package failures are recorded and the loop moves on; they never
abort the batch.  Cancellation does: an ``OperationCancelledError``
propagates out of ``reconcile`` untouched.

Each manager's installed list is fetched once per run and kept in sync
with the installs/uninstalls the reconciler performs.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from devctl.adapters.base import PackageManager, RunContext
from devctl.adapters.registry import ManagerRegistry
from devctl.core.errors import (
    AlreadyInstalledError,
    ManagerNotConfiguredError,
    NotInstalledError,
    PackageManagerError,
)
from devctl.core.models.outcome import (
    SKIP_INVALID,
    SKIP_NOT_CONFIGURED,
    SKIP_SATISFIED,
    PackageOutcome,
)
from devctl.core.models.package import DesiredPackage, InstalledPackage
from devctl.core.version import versions_equal

logger = logging.getLogger(__name__)


@dataclass
class ReconcileEvent:
    """Progress notification: ``start`` before, ``complete`` after a package."""

    kind: str
    index: int
    package: DesiredPackage
    outcome: PackageOutcome | None = None


EventCallback = Callable[[ReconcileEvent], None]


@dataclass
class ReconcileReport:
    """Ordered outcomes of one reconciliation run."""

    outcomes: list[PackageOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.skipped)

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0 or any(o.satisfied for o in self.outcomes):
            return "partial"
        return "failed"

    def managed_packages(self) -> list[DesiredPackage]:
        """Packages to merge into the persisted managed set."""
        return [o.package for o in self.outcomes if o.satisfied]

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


class Reconciler:
    """Runs the per-package decision loop against a manager registry."""

    def __init__(
        self,
        registry: ManagerRegistry,
        ctx: RunContext | None = None,
        on_event: EventCallback | None = None,
        strict: bool = False,
    ):
        self._registry = registry
        self._ctx = ctx or RunContext()
        self._on_event = on_event
        self._strict = strict
        self._installed_cache: dict[str, list[InstalledPackage]] = {}

    def reconcile(self, packages: Iterable[DesiredPackage]) -> ReconcileReport:
        """Process every package in order and return the report.

        Raises:
            ManagerNotConfiguredError: strict mode and a manager is missing
                (raised before any package is touched).
            OperationCancelledError: the run context was cancelled.
        """
        packages = list(packages)
        if self._strict:
            self._check_managers(packages)

        self._installed_cache.clear()
        report = ReconcileReport()

        for index, pkg in enumerate(packages):
            self._emit(ReconcileEvent("start", index, pkg))
            start = time.monotonic()

            outcome = self._process(pkg)
            outcome.duration_ms = int((time.monotonic() - start) * 1000)

            report.outcomes.append(outcome)
            self._emit(ReconcileEvent("complete", index, pkg, outcome))

        logger.info(
            "Reconciled %d package(s): %d succeeded, %d failed, %d skipped",
            report.total, report.succeeded, report.failed, report.skipped,
        )
        return report

    # ── Per-package decision ────────────────────────────────────

    def _process(self, pkg: DesiredPackage) -> PackageOutcome:
        if not pkg.is_valid:
            return PackageOutcome.skip(pkg, SKIP_INVALID)

        manager = self._registry.get(pkg.installed_by)
        if manager is None:
            logger.warning(
                "Skipping %s: package manager %s not configured", pkg.name, pkg.installed_by,
            )
            return PackageOutcome.skip(pkg, SKIP_NOT_CONFIGURED)

        try:
            installed = self._installed(pkg.installed_by, manager)
        except PackageManagerError as e:
            return PackageOutcome.failure(pkg, f"failed to list packages: {e}")

        current = next((p for p in installed if p.name == pkg.name), None)

        if current is None:
            return self._install(manager, pkg, action="install")

        if versions_equal(current.version, pkg.version):
            logger.info("%s already at %s", pkg.name, current.version)
            return PackageOutcome.skip(pkg, SKIP_SATISFIED)

        logger.info("%s: installed %s, want %s — reinstalling", pkg.name, current.version, pkg.version)
        try:
            manager.uninstall(self._ctx, pkg.name)
        except NotInstalledError:
            logger.info("%s was already gone before uninstall", pkg.name)
        except PackageManagerError as e:
            return PackageOutcome.failure(pkg, f"failed to uninstall: {e}", action="reinstall")
        installed.remove(current)

        return self._install(manager, pkg, action="reinstall")

    def _install(self, manager: PackageManager, pkg: DesiredPackage, action: str) -> PackageOutcome:
        try:
            manager.install(self._ctx, pkg.name, pkg.version)
        except AlreadyInstalledError:
            logger.info("%s reported as already installed", pkg.name)
        except PackageManagerError as e:
            return PackageOutcome.failure(pkg, f"failed to install: {e}", action=action)

        self._installed_cache[pkg.installed_by].append(InstalledPackage(
            name=pkg.name, version=pkg.version, source=pkg.installed_by,
        ))
        return PackageOutcome.success(pkg, action=action)

    # ── Helpers ─────────────────────────────────────────────────

    def _installed(self, manager_id: str, manager: PackageManager) -> list[InstalledPackage]:
        """Installed list for a manager, fetched at most once per run."""
        if manager_id not in self._installed_cache:
            self._installed_cache[manager_id] = list(manager.list_installed(self._ctx))
        return self._installed_cache[manager_id]

    def _check_managers(self, packages: list[DesiredPackage]) -> None:
        missing = sorted({
            p.installed_by for p in packages
            if p.is_valid and p.installed_by not in self._registry
        })
        if missing:
            raise ManagerNotConfiguredError(missing)

    def _emit(self, event: ReconcileEvent) -> None:
        if self._on_event is not None:
            self._on_event(event)


def reconcile(
    packages: Iterable[DesiredPackage],
    registry: ManagerRegistry,
    ctx: RunContext | None = None,
    on_event: EventCallback | None = None,
    strict: bool = False,
) -> ReconcileReport:
    """Convenience wrapper: build a Reconciler and run it once."""
    return Reconciler(registry, ctx=ctx, on_event=on_event, strict=strict).reconcile(packages)

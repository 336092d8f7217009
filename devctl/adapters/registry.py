"""
Manager registry — explicit table of package manager adapters.

Built once at startup from the persisted ``packageManagers``
registrations and handed to the reconciler.  No global state: tests
build their own registry with mocks.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from devctl.adapters.base import PackageManager
from devctl.adapters.managers.brew import BrewManager
from devctl.adapters.managers.scoop import ScoopManager
from devctl.adapters.mock import MockPackageManager
from devctl.core.models.config import DevctlConfig

logger = logging.getLogger(__name__)

# managerID → adapter factory (called with the executable path)
MANAGER_FACTORIES: dict[str, Callable[[str], PackageManager]] = {
    "scoop": ScoopManager,
    "brew": BrewManager,
}


class ManagerRegistry:
    """Lookup table from manager ID to adapter instance."""

    def __init__(self) -> None:
        self._managers: dict[str, PackageManager] = {}

    def register(self, manager: PackageManager, manager_id: str | None = None) -> None:
        """Register an adapter under ``manager_id`` (default: its name)."""
        key = manager_id or manager.name
        if key in self._managers:
            logger.warning("Overwriting existing package manager: %s", key)
        self._managers[key] = manager
        logger.debug("Registered package manager: %s → %r", key, manager)

    def unregister(self, manager_id: str) -> None:
        self._managers.pop(manager_id, None)

    def get(self, manager_id: str) -> PackageManager | None:
        """Resolve a manager ID, or None if not configured here."""
        return self._managers.get(manager_id)

    def __contains__(self, manager_id: object) -> bool:
        return manager_id in self._managers

    def list_managers(self) -> list[str]:
        return list(self._managers.keys())

    def manager_status(self) -> dict[str, dict[str, Any]]:
        """Availability of every registered adapter."""
        status = {}
        for key, manager in self._managers.items():
            status[key] = {
                "name": key,
                "executable_path": manager.executable_path,
                "available": manager.is_available(),
                "type": manager.__class__.__name__,
            }
        return status


def build_registry(config: DevctlConfig, mock_mode: bool = False) -> ManagerRegistry:
    """Build the registry from configured registrations.

    Registrations with no executable path, or for managers devctl has
    no adapter for (e.g. ``pwsh``), are left out.  In mock mode every
    registration gets an empty in-memory ``MockPackageManager``.
    """
    registry = ManagerRegistry()

    for manager_id, registration in config.package_managers.items():
        if mock_mode:
            registry.register(MockPackageManager(manager_name=manager_id))
            continue

        if not registration.executable_path:
            logger.warning("Executable path of %s not configured — skipping", manager_id)
            continue

        factory = MANAGER_FACTORIES.get(manager_id)
        if factory is None:
            logger.info("No adapter for package manager %s — skipping", manager_id)
            continue

        registry.register(factory(registration.executable_path), manager_id)

    return registry

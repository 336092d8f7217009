"""Adapters — package manager bindings.

Public re-exports for convenient access.
"""

from devctl.adapters.base import PackageManager, RunContext
from devctl.adapters.mock import MockPackageManager
from devctl.adapters.registry import ManagerRegistry, build_registry

__all__ = [
    "ManagerRegistry",
    "MockPackageManager",
    "PackageManager",
    "RunContext",
    "build_registry",
]

"""
Domain models — Pydantic types for devctl.

All models are re-exported here for convenient access:

    from devctl.core.models import DesiredPackage, DevctlConfig, PackageOutcome
"""

from devctl.core.models.config import DevctlConfig, ManagerRegistration, merge_packages
from devctl.core.models.outcome import PackageOutcome
from devctl.core.models.package import DesiredPackage, InstalledPackage, ManagedPackage

__all__ = [
    # package.py
    "DesiredPackage",
    # config.py
    "DevctlConfig",
    "InstalledPackage",
    "ManagedPackage",
    "ManagerRegistration",
    # outcome.py
    "PackageOutcome",
    "merge_packages",
]

"""
DevctlConfig — the persisted configuration document.

Serialized to ``<config_dir>/devctl.json`` and rewritten wholesale
after ``init`` and ``import``::

    {
      "dataDir": "/home/me/.devctl",
      "packageManagers": {"scoop": {"executablePath": "...", "version": ""}},
      "packages": [{"name": "git", "version": "2.40.0", "installedBy": "scoop"}]
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from devctl.core.models.package import DesiredPackage, ManagedPackage


class ManagerRegistration(BaseModel):
    """Where a package manager lives on this machine."""

    model_config = ConfigDict(populate_by_name=True)

    executable_path: str = Field(default="", alias="executablePath")
    version: str = ""


class DevctlConfig(BaseModel):
    """Root configuration model.

    Unknown keys are ignored on load so older/newer files still open.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data_dir: str = Field(default="", alias="dataDir")
    package_managers: dict[str, ManagerRegistration] = Field(
        default_factory=dict, alias="packageManagers"
    )
    packages: list[ManagedPackage] = Field(default_factory=list)

    def find_package(self, name: str) -> ManagedPackage | None:
        """First managed package with this exact name."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None

    def merge_packages(self, new: list[DesiredPackage]) -> None:
        """Merge ``new`` into the managed set (see :func:`merge_packages`)."""
        self.packages = merge_packages(self.packages, new)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def merge_packages(
    existing: list[ManagedPackage],
    new: list[DesiredPackage],
) -> list[ManagedPackage]:
    """Merge package records by name — last write wins.

    Existing names keep their position, new names are appended in the
    order they are first seen.
    """
    merged: dict[str, ManagedPackage] = {}
    for pkg in existing:
        merged[pkg.name] = pkg
    for pkg in new:
        merged[pkg.name] = ManagedPackage.from_desired(pkg)
    return list(merged.values())

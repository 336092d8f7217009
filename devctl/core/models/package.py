"""
Package models — what we want, what is there, what we manage.

``DesiredPackage`` comes from a manifest, ``InstalledPackage`` from a
package manager's ``list`` output, and ``ManagedPackage`` is the record
devctl persists once it has ensured a package is installed.

The JSON field for the manager is ``installedBy`` in every file format;
Python code uses ``installed_by``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DesiredPackage(BaseModel):
    """A package a manifest asks for."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    version: str = ""
    installed_by: str = Field(default="", alias="installedBy")

    @property
    def is_valid(self) -> bool:
        """All three fields must be non-empty."""
        return bool(self.name and self.version and self.installed_by)

    @property
    def label(self) -> str:
        """``name@version`` (or just ``name``) for display."""
        return f"{self.name}@{self.version}" if self.version else self.name

    def to_json(self) -> dict[str, str]:
        """Serialize using the external (camelCase) field names."""
        return self.model_dump(by_alias=True)


class ManagedPackage(DesiredPackage):
    """A package devctl has ensured is installed (persisted in config)."""

    @classmethod
    def from_desired(cls, pkg: DesiredPackage) -> ManagedPackage:
        return cls(name=pkg.name, version=pkg.version, installed_by=pkg.installed_by)


class InstalledPackage(BaseModel):
    """A package reported by a package manager. Never persisted."""

    name: str
    version: str = ""
    description: str = ""
    source: str = ""

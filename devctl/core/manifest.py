"""
Manifest loader — reads and writes package manifest files.

A manifest is the user-authored declaration of desired packages::

    {
      "platform": "windows",
      "packages": [
        {"name": "git", "version": "2.40.0", "installedBy": "scoop"}
      ]
    }

Entries missing ``name``, ``version`` or ``installedBy`` are dropped
silently; a single bad entry never aborts the load.  Only unreadable
files, malformed JSON, and manifests listing no packages are errors.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from devctl.core.errors import ManifestError
from devctl.core.models.config import DevctlConfig
from devctl.core.models.package import DesiredPackage
from devctl.core.services.detection import current_platform

logger = logging.getLogger(__name__)


class Manifest(BaseModel):
    """A parsed manifest: platform tag plus valid desired packages."""

    platform: str = ""
    packages: list[DesiredPackage] = Field(default_factory=list)
    dropped: int = 0            # invalid entries skipped while parsing

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.platform:
            data["platform"] = self.platform
        data["packages"] = [pkg.to_json() for pkg in self.packages]
        return data


def parse_manifest(data: Any) -> Manifest:
    """Build a Manifest from already-parsed JSON.

    Invalid entries are skipped.  Duplicate names are collapsed: the last
    entry wins but keeps the position of the first occurrence.

    Raises:
        ManifestError: ``data`` is not an object or has no package list.
    """
    if not isinstance(data, dict):
        raise ManifestError(f"expected a JSON object, got {type(data).__name__}")

    raw_packages = data.get("packages")
    if not isinstance(raw_packages, list) or not raw_packages:
        raise ManifestError("no packages specified")

    platform = data.get("platform") or ""
    if not isinstance(platform, str):
        raise ManifestError("'platform' must be a string")

    by_name: dict[str, DesiredPackage] = {}
    dropped = 0
    for index, entry in enumerate(raw_packages):
        pkg = _parse_entry(entry)
        if pkg is None or not pkg.is_valid:
            logger.debug("Dropping invalid manifest entry %d: %r", index, entry)
            dropped += 1
            continue
        if pkg.name in by_name:
            logger.debug("Duplicate manifest entry for %s — last one wins", pkg.name)
        by_name[pkg.name] = pkg

    return Manifest(platform=platform, packages=list(by_name.values()), dropped=dropped)


def _parse_entry(entry: Any) -> DesiredPackage | None:
    if not isinstance(entry, dict):
        return None
    try:
        return DesiredPackage.model_validate(entry)
    except ValidationError:
        return None


def load_manifest(path: Path, *, check_platform: bool = True) -> Manifest:
    """Load a manifest file.

    Args:
        path: Manifest JSON file.
        check_platform: Reject manifests tagged for another platform.

    Raises:
        ManifestError: unreadable, malformed, empty, or wrong platform.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"failed to read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestError(f"failed to parse JSON in {path}: {e}") from e

    manifest = parse_manifest(data)

    if check_platform and manifest.platform:
        here = current_platform()
        if manifest.platform != here:
            raise ManifestError(
                f"manifest is for platform '{manifest.platform}', "
                f"but current platform is '{here}'"
            )

    logger.info(
        "Loaded manifest %s: %d package(s), %d dropped",
        path, len(manifest.packages), manifest.dropped,
    )
    return manifest


def save_manifest(path: Path, manifest: Manifest) -> None:
    """Write a manifest as pretty JSON, creating parent directories.

    Raises:
        ManifestError: nothing to write, or the file cannot be written.
    """
    if not manifest.packages:
        raise ManifestError("no packages specified")

    content = json.dumps(manifest.to_json(), indent=2, ensure_ascii=False) + "\n"
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"failed to write {path}: {e}") from e

    logger.debug("Manifest written to %s", path)


def export_manifest(config: DevctlConfig, platform: str | None = None) -> Manifest:
    """Managed packages as a manifest, skipping incomplete records."""
    packages = [
        DesiredPackage(name=p.name, version=p.version, installed_by=p.installed_by)
        for p in config.packages
        if p.is_valid
    ]
    return Manifest(platform=platform or current_platform(), packages=packages)

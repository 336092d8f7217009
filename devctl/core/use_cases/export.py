"""
Export use case — write managed packages as an importable manifest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devctl.core.config.settings import APP_NAME, Settings
from devctl.core.errors import DevctlError
from devctl.core.manifest import export_manifest, save_manifest
from devctl.core.persistence.config_file import load_config
from devctl.core.services.detection import current_platform

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Result of the export use case."""

    path: Path | None = None
    count: int = 0
    error: str | None = None

    @property
    def written(self) -> bool:
        return self.path is not None and self.count > 0

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "path": str(self.path) if self.path else None,
            "count": self.count,
            "written": self.written,
        }


def default_export_name(platform: str) -> str:
    return f"{APP_NAME}-export.{platform}.json"


def run_export(
    settings: Settings,
    output: Path | None = None,
    directory: Path | None = None,
    platform: str | None = None,
) -> ExportResult:
    """Export managed packages to ``output`` or ``directory/<default name>``.

    Nothing is written when there are no valid managed packages.

    Raises:
        ValueError: both ``output`` and ``directory`` were given.
    """
    if output is not None and directory is not None:
        raise ValueError("cannot use an output file and an output directory together")

    platform = platform or current_platform()
    result = ExportResult()

    try:
        config = load_config(settings.config_file)
        manifest = export_manifest(config, platform)
        if not manifest.packages:
            logger.info("No valid packages to export")
            return result

        path = output or (directory or Path(".")) / default_export_name(platform)
        save_manifest(path, manifest)
    except DevctlError as e:
        result.error = str(e)
        return result

    result.path = path
    result.count = len(manifest.packages)
    logger.info("Exported %d package(s) to %s", result.count, path)
    return result

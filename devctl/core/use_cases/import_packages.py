"""
Import use case — reconcile a manifest and persist what succeeded.

Ties together manifest loading, the manager registry, the reconciler
and the config store.  The whole read-modify-write of the config file
happens under the config lock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from devctl.adapters.base import RunContext
from devctl.adapters.registry import build_registry
from devctl.core.config.settings import Settings
from devctl.core.engine.reconciler import EventCallback, ReconcileReport, Reconciler
from devctl.core.errors import DevctlError
from devctl.core.manifest import Manifest, load_manifest
from devctl.core.persistence.config_file import config_lock, load_config, save_config

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Result of the import use case."""

    manifest: Manifest | None = None
    report: ReconcileReport | None = None
    config_path: Path | None = None
    config_saved: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}

        result: dict = {
            "config_path": str(self.config_path) if self.config_path else None,
            "config_saved": self.config_saved,
        }
        if self.manifest:
            result["dropped"] = self.manifest.dropped
        if self.report:
            result.update(self.report.to_dict())
        return result


def run_import(
    settings: Settings,
    manifest_path: Path,
    *,
    ctx: RunContext | None = None,
    on_event: EventCallback | None = None,
    strict: bool = False,
    check_platform: bool = True,
    mock_mode: bool = False,
) -> ImportResult:
    """Import packages from a manifest file.

    Args:
        settings: Resolved settings (config file location).
        manifest_path: The manifest to converge toward.
        ctx: Run context bounding every package manager command.
        on_event: Progress callback, presentation only.
        strict: Abort if any referenced manager is not configured.
        check_platform: Reject manifests tagged for another platform.
        mock_mode: Use in-memory managers and do not persist.

    Returns:
        ImportResult.  Fatal problems are reported in ``error``.
    """
    result = ImportResult(config_path=settings.config_file)
    ctx = ctx or RunContext(timeout=settings.timeout)

    try:
        with config_lock(settings.config_file):
            config = load_config(settings.config_file)
            manifest = load_manifest(manifest_path, check_platform=check_platform)
            result.manifest = manifest

            registry = build_registry(config, mock_mode=mock_mode)
            reconciler = Reconciler(registry, ctx=ctx, on_event=on_event, strict=strict)
            result.report = reconciler.reconcile(manifest.packages)

            if mock_mode:
                logger.info("Mock mode — config not saved")
                return result

            config.merge_packages(result.report.managed_packages())
            if not config.data_dir:
                config.data_dir = str(settings.data_dir)
            save_config(config, settings.config_file)
            result.config_saved = True
    except DevctlError as e:
        logger.debug("Import aborted", exc_info=True)
        result.error = str(e)

    return result

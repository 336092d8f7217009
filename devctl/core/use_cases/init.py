"""
Init use case — detect package managers and register them.

The detected set replaces the previous ``packageManagers`` table;
managed packages are kept.  Managers that are supported on this
platform but missing come back with a manual install guide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from devctl.core.config.settings import Settings
from devctl.core.errors import DevctlError
from devctl.core.models.config import ManagerRegistration
from devctl.core.persistence.config_file import config_lock, load_config, save_config
from devctl.core.services.detection import DetectionResult, detect_managers
from devctl.core.services.install_guides import InstallGuide, get_install_guide

logger = logging.getLogger(__name__)


@dataclass
class InitResult:
    """Result of the init use case."""

    detection: DetectionResult | None = None
    guides: list[InstallGuide] = field(default_factory=list)
    config_path: Path | None = None
    config_saved: bool = False
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "detection": self.detection.to_dict() if self.detection else None,
            "guides": [g.to_dict() for g in self.guides],
            "config_path": str(self.config_path) if self.config_path else None,
            "config_saved": self.config_saved,
        }


def run_init(settings: Settings, platform: str | None = None) -> InitResult:
    """Detect managers on ``platform`` (default: this one) and save them."""
    result = InitResult(config_path=settings.config_file)

    detection = detect_managers(platform)
    result.detection = detection

    for info in detection.missing:
        guide = get_install_guide(info.manager_id, detection.platform)
        if guide is not None:
            result.guides.append(guide)

    try:
        with config_lock(settings.config_file):
            config = load_config(settings.config_file)
            config.package_managers = {
                info.manager_id: ManagerRegistration(executable_path=info.executable_path)
                for info in detection.installed
            }
            if not config.data_dir:
                config.data_dir = str(settings.data_dir)
            save_config(config, settings.config_file)
            result.config_saved = True
    except DevctlError as e:
        result.error = str(e)
        return result

    logger.info(
        "Registered %d package manager(s) on %s",
        len(detection.installed), detection.platform,
    )
    return result

"""
Package manager detection — which managers exist on this machine.

Each platform has a fixed list of supported managers; each one is
looked up on PATH.  Detection never installs anything.
"""

from __future__ import annotations

import logging
import shutil
import sys
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

PLATFORM_WINDOWS = "windows"
PLATFORM_DARWIN = "darwin"
PLATFORM_LINUX = "linux"

_SUPPORTED_MANAGERS: dict[str, list[str]] = {
    PLATFORM_WINDOWS: ["scoop", "pwsh"],
    PLATFORM_DARWIN: ["brew"],
    PLATFORM_LINUX: ["brew", "apt"],
}


def current_platform() -> str:
    """``windows``, ``darwin``, ``linux`` or the raw ``sys.platform``."""
    if sys.platform.startswith("win"):
        return PLATFORM_WINDOWS
    if sys.platform == "darwin":
        return PLATFORM_DARWIN
    if sys.platform.startswith("linux"):
        return PLATFORM_LINUX
    return sys.platform


def supported_managers(platform: str) -> list[str]:
    """Manager IDs devctl knows about on a platform (empty if none)."""
    return list(_SUPPORTED_MANAGERS.get(platform, []))


def is_manager_supported(manager_id: str, platform: str) -> bool:
    return manager_id in _SUPPORTED_MANAGERS.get(platform, [])


@dataclass
class ManagerInfo:
    """Detection result for one package manager."""

    manager_id: str
    installed: bool = False
    executable_path: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.manager_id,
            "installed": self.installed,
            "executable_path": self.executable_path,
        }


@dataclass
class DetectionResult:
    """Detection results for every supported manager on a platform."""

    platform: str = ""
    managers: list[ManagerInfo] = field(default_factory=list)

    @property
    def installed(self) -> list[ManagerInfo]:
        return [m for m in self.managers if m.installed]

    @property
    def missing(self) -> list[ManagerInfo]:
        return [m for m in self.managers if not m.installed]

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "managers": [m.to_dict() for m in self.managers],
            "total_installed": len(self.installed),
        }


def detect_managers(platform: str | None = None) -> DetectionResult:
    """Look up every supported manager of ``platform`` on PATH."""
    platform = platform or current_platform()
    result = DetectionResult(platform=platform)

    for manager_id in supported_managers(platform):
        path = shutil.which(manager_id) or ""
        logger.debug("Detect %s → %s", manager_id, path or "not found")
        result.managers.append(ManagerInfo(
            manager_id=manager_id,
            installed=bool(path),
            executable_path=path,
        ))

    return result

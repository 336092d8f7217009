"""
Manual installation guides for package managers devctl cannot find.

Static text only; devctl never installs a package manager itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from devctl.core.services.detection import PLATFORM_DARWIN, PLATFORM_WINDOWS

_BREW_INSTALL = (
    'Run: /bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)


@dataclass
class InstallGuide:
    manager_id: str
    platform: str
    instructions: list[str] = field(default_factory=list)
    url: str = ""
    verify_cmd: str = ""

    def to_dict(self) -> dict:
        return {
            "manager": self.manager_id,
            "platform": self.platform,
            "instructions": self.instructions,
            "url": self.url,
            "verify_cmd": self.verify_cmd,
        }


def get_install_guide(manager_id: str, platform: str) -> InstallGuide | None:
    """Guide for installing ``manager_id`` on ``platform``, if we have one."""
    if manager_id == "scoop":
        return InstallGuide(
            manager_id="scoop",
            platform=PLATFORM_WINDOWS,
            instructions=[
                "Open PowerShell",
                "Run: Set-ExecutionPolicy -ExecutionPolicy RemoteSigned -Scope CurrentUser",
                "Run: Invoke-RestMethod -Uri https://get.scoop.sh | Invoke-Expression",
                "Restart your terminal after installation",
            ],
            url="https://scoop.sh",
            verify_cmd="scoop --version",
        )

    if manager_id == "pwsh":
        return InstallGuide(
            manager_id="pwsh",
            platform=PLATFORM_WINDOWS,
            instructions=[
                "Visit the PowerShell GitHub releases page",
                "Download the latest .msi installer for Windows",
                "Run the installer and follow the prompts",
                "Restart your terminal after installation",
            ],
            url="https://github.com/PowerShell/PowerShell/releases",
            verify_cmd="pwsh --version",
        )

    if manager_id == "brew":
        if platform == PLATFORM_DARWIN:
            path_step = "Add Homebrew to your PATH as instructed"
        else:
            path_step = (
                'Add Homebrew to your PATH: '
                'eval "$(/home/linuxbrew/.linuxbrew/bin/brew shellenv)"'
            )
        return InstallGuide(
            manager_id="brew",
            platform=platform,
            instructions=[
                "Open Terminal",
                _BREW_INSTALL,
                "Follow the on-screen instructions",
                path_step,
            ],
            url="https://brew.sh",
            verify_cmd="brew --version",
        )

    return None

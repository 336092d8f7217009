"""
Runtime settings — where devctl keeps its files.

Resolved in precedence order:
    CLI option  >  DEVCTL_* env var  >  default

    DEVCTL_CONFIG_DIR   config directory     (~/.config/devctl)
    DEVCTL_DATA_DIR     data directory       (~/.devctl)
    DEVCTL_TIMEOUT      per-run timeout, s   (unbounded)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

APP_NAME = "devctl"
CONFIG_FILE_NAME = f"{APP_NAME}.json"

ENV_CONFIG_DIR = "DEVCTL_CONFIG_DIR"
ENV_DATA_DIR = "DEVCTL_DATA_DIR"
ENV_TIMEOUT = "DEVCTL_TIMEOUT"


class Settings(BaseModel):
    """Resolved paths and limits for one process."""

    config_dir: Path
    data_dir: Path
    timeout: float | None = None

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME


def load_settings(
    config_dir: Path | None = None,
    data_dir: Path | None = None,
    timeout: float | None = None,
) -> Settings:
    """Resolve settings from arguments, environment, then defaults."""
    home = Path.home()

    if config_dir is None:
        env = os.environ.get(ENV_CONFIG_DIR)
        config_dir = Path(env) if env else home / ".config" / APP_NAME

    if data_dir is None:
        env = os.environ.get(ENV_DATA_DIR)
        data_dir = Path(env) if env else home / f".{APP_NAME}"

    if timeout is None:
        timeout = _parse_timeout(os.environ.get(ENV_TIMEOUT))

    return Settings(
        config_dir=config_dir.expanduser(),
        data_dir=data_dir.expanduser(),
        timeout=timeout,
    )


def _parse_timeout(raw: str | None) -> float | None:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", ENV_TIMEOUT, raw)
        return None
    return value if value > 0 else None

"""
Config file persistence — locked, atomic read/write for DevctlConfig.

The configuration lives in ``<config_dir>/devctl.json``.  Writes are
atomic (write to temp file, then rename) so a crash never leaves a
truncated file.  ``config_lock`` guards a whole read-modify-write
cycle against a second devctl process doing the same.
"""

from __future__ import annotations

import json
import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock, Timeout
from pydantic import ValidationError

from devctl.core.errors import ConfigIOError
from devctl.core.models.config import DevctlConfig

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 30.0


def load_config(path: Path) -> DevctlConfig:
    """Load configuration from a JSON file.

    Returns:
        DevctlConfig. A missing file yields a fresh, empty config.

    Raises:
        ConfigIOError: the file exists but cannot be read or parsed.
    """
    if not path.is_file():
        logger.info("No config file at %s — starting fresh", path)
        return DevctlConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigIOError(f"failed to read config file {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigIOError(f"failed to parse config file {path}: {e}") from e

    if data is None:
        return DevctlConfig()

    try:
        config = DevctlConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigIOError(f"invalid config file {path}: {e}") from e

    logger.debug(
        "Loaded config from %s (%d manager(s), %d package(s))",
        path, len(config.package_managers), len(config.packages),
    )
    return config


def save_config(config: DevctlConfig, path: Path) -> None:
    """Save configuration to a JSON file (atomic write).

    Raises:
        ConfigIOError: the directory or file cannot be written.
    """
    content = json.dumps(config.to_json(), indent=2, ensure_ascii=False) + "\n"

    try:
        atomic_write_text(path, content)
    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        raise ConfigIOError(f"failed to write config file {path}: {e}") from e

    logger.debug("Config saved to %s", path)


def atomic_write_text(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename over ``path``.

    Parent directories are created.  Raises OSError.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


@contextmanager
def config_lock(path: Path, timeout: float = DEFAULT_LOCK_TIMEOUT) -> Iterator[None]:
    """Hold an advisory lock on ``<path>.lock`` for the duration.

    Raises:
        ConfigIOError: another devctl process holds the lock too long.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigIOError(f"failed to create config directory {path.parent}: {e}") from e

    lock = FileLock(str(path) + ".lock", timeout=timeout)
    try:
        lock.acquire()
    except Timeout as e:
        raise ConfigIOError(
            f"config file {path} is locked by another devctl process"
        ) from e
    try:
        yield
    finally:
        lock.release()

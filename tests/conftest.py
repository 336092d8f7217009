"""
Shared test fixtures and configuration.
"""

import json
import logging
import stat
from pathlib import Path

import pytest

from devctl.core.config.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Keep every test away from the real ~/.config/devctl and ~/.devctl."""
    monkeypatch.setenv("DEVCTL_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("DEVCTL_DATA_DIR", str(tmp_path / "data"))
    for name in ("DEVCTL_TIMEOUT", "DEVCTL_LOG_LEVEL", "DEVCTL_LOG_FILE", "DEVCTL_LOG_FILE_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI tests reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary directory."""
    return load_settings(config_dir=tmp_path / "config", data_dir=tmp_path / "data")


@pytest.fixture
def write_json():
    """Write a JSON document and return its path."""

    def _write(path: Path, data) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_script(tmp_path: Path):
    """Create an executable /bin/sh script standing in for a package manager.

    The script appends its arguments to ``calls.log`` next to it before
    running ``body``.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        log = bin_dir / "calls.log"
        script.write_text(f'#!/bin/sh\necho "$@" >> "{log}"\n{body}\n', encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def script_calls():
    """Argument lines recorded by scripts made with ``make_script``."""

    def _calls(script: Path) -> list[str]:
        log = script.parent / "calls.log"
        if not log.exists():
            return []
        return log.read_text(encoding="utf-8").splitlines()

    return _calls

"""
Tests for the config store — load, atomic save, lock.
"""

import json
from pathlib import Path

import pytest
from filelock import FileLock, Timeout

from devctl.core.errors import ConfigIOError
from devctl.core.models import DevctlConfig, ManagedPackage, ManagerRegistration
from devctl.core.persistence import config_file
from devctl.core.persistence.config_file import (
    atomic_write_text,
    config_lock,
    load_config,
    save_config,
)


class TestLoadConfig:
    def test_missing_file_is_empty(self, tmp_path: Path):
        config = load_config(tmp_path / "devctl.json")
        assert config == DevctlConfig()

    def test_json_null_is_empty(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        path.write_text("null")
        assert load_config(path).packages == []

    def test_load(self, tmp_path: Path, write_json):
        path = write_json(tmp_path / "devctl.json", {
            "dataDir": "/data",
            "packageManagers": {"scoop": {"executablePath": "/bin/scoop"}},
            "packages": [{"name": "git", "version": "2.40.0", "installedBy": "scoop"}],
        })
        config = load_config(path)
        assert config.data_dir == "/data"
        assert config.package_managers["scoop"].executable_path == "/bin/scoop"
        assert config.packages[0].name == "git"

    def test_malformed_json(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        path.write_text("{oops")
        with pytest.raises(ConfigIOError, match="failed to parse"):
            load_config(path)

    def test_invalid_utf8(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        path.write_bytes(b'{"dataDir": "\xff"}')
        with pytest.raises(ConfigIOError, match="failed to read"):
            load_config(path)

    def test_schema_mismatch(self, tmp_path: Path, write_json):
        path = write_json(tmp_path / "devctl.json", {"packages": "git"})
        with pytest.raises(ConfigIOError, match="invalid config"):
            load_config(path)


class TestSaveConfig:
    def _config(self) -> DevctlConfig:
        return DevctlConfig(
            data_dir="/data",
            package_managers={"scoop": ManagerRegistration(executable_path="/bin/scoop")},
            packages=[ManagedPackage(name="git", version="2.40.0", installed_by="scoop")],
        )

    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "cfg" / "devctl.json"
        save_config(self._config(), path)
        assert load_config(path) == self._config()

    def test_camel_case_on_disk(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        save_config(self._config(), path)
        data = json.loads(path.read_text())
        assert set(data) == {"dataDir", "packageManagers", "packages"}
        assert data["packages"][0]["installedBy"] == "scoop"

    def test_no_temp_files_left(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        save_config(self._config(), path)
        save_config(DevctlConfig(), path)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["devctl.json"]

    def test_unwritable_location(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ConfigIOError, match="failed to write"):
            save_config(DevctlConfig(), blocker / "devctl.json")


class TestAtomicWrite:
    def test_replaces_existing(self, tmp_path: Path):
        path = tmp_path / "f.json"
        path.write_text("old")
        atomic_write_text(path, "new")
        assert path.read_text() == "new"


class TestConfigLock:
    def test_lock_file_created(self, tmp_path: Path):
        path = tmp_path / "cfg" / "devctl.json"
        with config_lock(path):
            assert (tmp_path / "cfg" / "devctl.json.lock").exists()

    def test_reentrant_after_release(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        with config_lock(path):
            pass
        with config_lock(path, timeout=0.1):
            pass

    def test_held_lock_times_out(self, tmp_path: Path, monkeypatch):
        class BusyLock:
            def __init__(self, lock_file, timeout=-1):
                self.lock_file = lock_file

            def acquire(self):
                raise Timeout(self.lock_file)

        monkeypatch.setattr(config_file, "FileLock", BusyLock)
        with pytest.raises(ConfigIOError, match="locked by another devctl process"):
            with config_lock(tmp_path / "devctl.json", timeout=0.1):
                pass

    def test_released_on_error(self, tmp_path: Path):
        path = tmp_path / "devctl.json"
        with pytest.raises(RuntimeError):
            with config_lock(path):
                raise RuntimeError("boom")
        lock = FileLock(str(path) + ".lock", timeout=0.1)
        lock.acquire()
        lock.release()

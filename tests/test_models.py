"""
Tests for domain models — packages, config, outcomes.
"""

from devctl.core.models import (
    DesiredPackage,
    DevctlConfig,
    ManagedPackage,
    PackageOutcome,
    merge_packages,
)
from devctl.core.models.outcome import SKIP_NOT_CONFIGURED, SKIP_SATISFIED


def _pkg(name: str, version: str = "1.0.0", by: str = "scoop") -> DesiredPackage:
    return DesiredPackage(name=name, version=version, installed_by=by)


# ── Packages ────────────────────────────────────────────────────


class TestDesiredPackage:
    def test_alias_round_trip(self):
        pkg = DesiredPackage.model_validate(
            {"name": "git", "version": "2.40.0", "installedBy": "scoop"}
        )
        assert pkg.installed_by == "scoop"
        assert pkg.to_json() == {"name": "git", "version": "2.40.0", "installedBy": "scoop"}

    def test_valid_requires_all_fields(self):
        assert _pkg("git").is_valid
        assert not _pkg("").is_valid
        assert not _pkg("git", version="").is_valid
        assert not _pkg("git", by="").is_valid

    def test_label(self):
        assert _pkg("git", "2.40.0").label == "git@2.40.0"
        assert DesiredPackage(name="git").label == "git"


# ── Config ──────────────────────────────────────────────────────


class TestDevctlConfig:
    def test_defaults(self):
        config = DevctlConfig()
        assert config.data_dir == ""
        assert config.package_managers == {}
        assert config.packages == []

    def test_camel_case_json(self):
        config = DevctlConfig.model_validate({
            "dataDir": "/data",
            "packageManagers": {"scoop": {"executablePath": "/bin/scoop", "version": "0.4"}},
            "packages": [{"name": "git", "version": "2.40.0", "installedBy": "scoop"}],
        })
        assert config.package_managers["scoop"].executable_path == "/bin/scoop"
        data = config.to_json()
        assert data["dataDir"] == "/data"
        assert data["packageManagers"]["scoop"]["executablePath"] == "/bin/scoop"
        assert data["packages"][0]["installedBy"] == "scoop"

    def test_unknown_keys_ignored(self):
        config = DevctlConfig.model_validate({"packages": [], "theme": "dark"})
        assert "theme" not in config.to_json()

    def test_find_package(self):
        config = DevctlConfig(packages=[ManagedPackage.from_desired(_pkg("git"))])
        assert config.find_package("git") is not None
        assert config.find_package("Git") is None


class TestMergePackages:
    def test_last_write_wins(self):
        existing = [ManagedPackage.from_desired(_pkg("git", "2.40.0"))]
        merged = merge_packages(existing, [_pkg("git", "2.41.0")])
        assert len(merged) == 1
        assert merged[0].version == "2.41.0"

    def test_order_preserved(self):
        existing = [
            ManagedPackage.from_desired(_pkg("git")),
            ManagedPackage.from_desired(_pkg("curl")),
        ]
        merged = merge_packages(existing, [_pkg("jq"), _pkg("git", "9.9.9")])
        assert [p.name for p in merged] == ["git", "curl", "jq"]

    def test_merge_is_by_name_across_managers(self):
        existing = [ManagedPackage.from_desired(_pkg("git", by="scoop"))]
        merged = merge_packages(existing, [_pkg("git", by="brew")])
        assert len(merged) == 1
        assert merged[0].installed_by == "brew"

    def test_config_merge_method(self):
        config = DevctlConfig()
        config.merge_packages([_pkg("git")])
        assert isinstance(config.packages[0], ManagedPackage)


# ── Outcomes ────────────────────────────────────────────────────


class TestPackageOutcome:
    def test_success(self):
        outcome = PackageOutcome.success(_pkg("git"), action="install")
        assert outcome.ok
        assert outcome.satisfied
        assert not outcome.failed

    def test_failure(self):
        outcome = PackageOutcome.failure(_pkg("git"), error="boom")
        assert outcome.failed
        assert not outcome.satisfied
        assert outcome.error == "boom"

    def test_satisfied_skip(self):
        outcome = PackageOutcome.skip(_pkg("git"), SKIP_SATISFIED)
        assert outcome.skipped
        assert outcome.satisfied
        assert outcome.action == "none"

    def test_other_skip_not_satisfied(self):
        outcome = PackageOutcome.skip(_pkg("git"), SKIP_NOT_CONFIGURED)
        assert not outcome.satisfied

    def test_to_dict_flattens_package(self):
        data = PackageOutcome.success(_pkg("git", "2.40.0"), action="install").to_dict()
        assert data["name"] == "git"
        assert data["installedBy"] == "scoop"
        assert data["status"] == "succeeded"
        assert "ended_at" in data

"""
Tests for the reconciler — the per-package install/skip/reinstall loop.

All package managers here are recording mocks.
"""

import pytest

from devctl.adapters.base import RunContext
from devctl.adapters.mock import MockPackageManager
from devctl.adapters.registry import ManagerRegistry
from devctl.core.engine.reconciler import ReconcileReport, Reconciler, reconcile
from devctl.core.errors import (
    AlreadyInstalledError,
    ManagerNotConfiguredError,
    NotInstalledError,
    OperationCancelledError,
    OperationTimeoutError,
)
from devctl.core.models import DesiredPackage, DevctlConfig, InstalledPackage, ManagedPackage
from devctl.core.models.outcome import SKIP_INVALID, SKIP_NOT_CONFIGURED, SKIP_SATISFIED
from devctl.core.manifest import export_manifest


def _pkg(name: str, version: str = "1.0.0", by: str = "scoop") -> DesiredPackage:
    return DesiredPackage(name=name, version=version, installed_by=by)


def _installed(name: str, version: str) -> InstalledPackage:
    return InstalledPackage(name=name, version=version, source="scoop")


@pytest.fixture
def scoop() -> MockPackageManager:
    return MockPackageManager(manager_name="scoop")


@pytest.fixture
def registry(scoop: MockPackageManager) -> ManagerRegistry:
    registry = ManagerRegistry()
    registry.register(scoop)
    return registry


def _names(packages) -> list[str]:
    return [p.name for p in packages]


# ── Core decisions ──────────────────────────────────────────────────


class TestDecisions:
    def test_absent_package_installed_once(self, registry, scoop):
        report = reconcile([_pkg("git", "2.40.0")], registry)

        assert scoop.calls("install") == ["git@2.40.0"]
        assert scoop.calls("uninstall") == []
        assert report.outcomes[0].ok
        assert report.outcomes[0].action == "install"
        assert _names(report.managed_packages()) == ["git"]

    def test_equal_version_skipped(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")

        report = reconcile([_pkg("git", "v2.40.0")], registry)

        assert scoop.calls("install") == []
        assert scoop.calls("uninstall") == []
        assert report.outcomes[0].skipped
        assert report.outcomes[0].reason == SKIP_SATISFIED
        assert _names(report.managed_packages()) == ["git"]

    def test_different_version_reinstalled(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")

        report = reconcile([_pkg("git", "2.41.0")], registry)

        ops = [(op, arg) for op, arg in scoop.call_log if op != "list"]
        assert ops == [("uninstall", "git"), ("install", "git@2.41.0")]
        assert report.outcomes[0].ok
        assert report.outcomes[0].action == "reinstall"
        assert scoop.installed["git"].version == "2.41.0"

    def test_name_match_case_sensitive(self, registry, scoop):
        scoop.installed["Git"] = _installed("Git", "2.40.0")

        reconcile([_pkg("git", "2.40.0")], registry)

        assert scoop.calls("install") == ["git@2.40.0"]


# ── Skips ───────────────────────────────────────────────────────────


class TestSkips:
    def test_zero_valid_packages_no_calls(self, registry, scoop):
        report = reconcile([DesiredPackage(name="git"), _pkg("", "1")], registry)

        assert scoop.call_count == 0
        assert [o.reason for o in report.outcomes] == [SKIP_INVALID, SKIP_INVALID]
        assert report.managed_packages() == []

    def test_empty_input(self, registry, scoop):
        report = reconcile([], registry)
        assert report.total == 0
        assert report.status == "ok"
        assert scoop.call_count == 0

    def test_unconfigured_manager_soft_skip(self, registry, scoop, caplog):
        report = reconcile([_pkg("wget", by="apt"), _pkg("git")], registry)

        assert report.outcomes[0].skipped
        assert report.outcomes[0].reason == SKIP_NOT_CONFIGURED
        assert report.outcomes[1].ok
        assert scoop.calls("install") == ["git@1.0.0"]
        assert "not configured" in caplog.text
        assert _names(report.managed_packages()) == ["git"]

    def test_strict_aborts_before_any_package(self, registry, scoop):
        with pytest.raises(ManagerNotConfiguredError) as exc_info:
            reconcile([_pkg("git"), _pkg("wget", by="apt")], registry, strict=True)

        assert exc_info.value.manager_ids == ["apt"]
        assert scoop.call_count == 0

    def test_strict_ignores_invalid_entries(self, registry, scoop):
        invalid = DesiredPackage(name="x", version="", installed_by="apt")
        report = reconcile([invalid, _pkg("git")], registry, strict=True)
        assert report.succeeded == 1


# ── Failures ────────────────────────────────────────────────────────


class TestFailures:
    def test_install_failure_does_not_stop_batch(self, registry, scoop):
        scoop.set_failure("install", "a")

        report = reconcile([_pkg("a"), _pkg("b")], registry)

        assert scoop.calls("install") == ["a@1.0.0", "b@1.0.0"]
        assert report.outcomes[0].failed
        assert "failed to install" in report.outcomes[0].error
        assert report.outcomes[1].ok
        assert _names(report.managed_packages()) == ["b"]
        assert report.status == "partial"

    def test_uninstall_failure_skips_install(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")
        scoop.set_failure("uninstall", "git")

        report = reconcile([_pkg("git", "2.41.0")], registry)

        assert scoop.calls("install") == []
        assert report.outcomes[0].failed
        assert "failed to uninstall" in report.outcomes[0].error
        assert report.managed_packages() == []

    def test_list_failure_fails_package_and_is_retried(self, registry, scoop):
        scoop.set_failure("list")

        report = reconcile([_pkg("a"), _pkg("b")], registry)

        assert scoop.calls("list") == ["", ""]
        assert all(o.failed for o in report.outcomes)
        assert "failed to list packages" in report.outcomes[0].error
        assert report.status == "failed"

    def test_already_installed_on_install_is_benign(self, registry, scoop):
        scoop.set_failure("install", "git", AlreadyInstalledError("git"))

        report = reconcile([_pkg("git")], registry)

        assert report.outcomes[0].ok
        assert _names(report.managed_packages()) == ["git"]

    def test_not_installed_on_uninstall_is_benign(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")
        scoop.set_failure("uninstall", "git", NotInstalledError("git"))

        report = reconcile([_pkg("git", "2.41.0")], registry)

        assert scoop.calls("install") == ["git@2.41.0"]
        assert report.outcomes[0].ok


# ── Caching ─────────────────────────────────────────────────────────


class TestInstalledCache:
    def test_list_once_per_manager(self, registry, scoop):
        brew = MockPackageManager(manager_name="brew")
        registry.register(brew)

        reconcile([_pkg("a"), _pkg("b"), _pkg("c", by="brew"), _pkg("d")], registry)

        assert scoop.calls("list") == [""]
        assert brew.calls("list") == [""]

    def test_cache_sees_own_install(self, registry, scoop):
        reconciler = Reconciler(registry)
        reconciler.reconcile([_pkg("git", "2.40.0")])
        scoop.reset()

        # A second run lists afresh and finds it installed
        report = reconciler.reconcile([_pkg("git", "2.40.0")])
        assert scoop.calls("install") == []
        assert report.outcomes[0].reason == SKIP_SATISFIED

    def test_later_duplicate_sees_install(self, registry, scoop):
        report = reconcile([_pkg("git", "2.40.0"), _pkg("git", "2.40.0")], registry)

        assert scoop.calls("install") == ["git@2.40.0"]
        assert scoop.calls("list") == [""]
        assert report.outcomes[1].reason == SKIP_SATISFIED

    def test_later_duplicate_sees_reinstall(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")

        report = reconcile([_pkg("git", "2.41.0"), _pkg("git", "v2.41.0")], registry)

        assert scoop.calls("uninstall") == ["git"]
        assert scoop.calls("install") == ["git@2.41.0"]
        assert report.outcomes[1].reason == SKIP_SATISFIED


# ── Cancellation ────────────────────────────────────────────────────


class TestCancellation:
    def test_cancellation_propagates(self, registry, scoop):
        scoop.set_failure("install", "b", OperationCancelledError("scoop install b"))

        with pytest.raises(OperationCancelledError):
            reconcile([_pkg("a"), _pkg("b"), _pkg("c")], registry)

        assert scoop.calls("install") == ["a@1.0.0", "b@1.0.0"]

    def test_timeout_propagates(self, registry, scoop):
        scoop.set_failure("list", "", OperationTimeoutError("scoop export", 5))

        with pytest.raises(OperationTimeoutError):
            reconcile([_pkg("a")], registry, ctx=RunContext(timeout=5))


# ── Events and report ───────────────────────────────────────────────


class TestEventsAndReport:
    def test_start_and_complete_events_in_order(self, registry):
        events = []
        reconcile([_pkg("a"), _pkg("b")], registry, on_event=events.append)

        assert [(e.kind, e.index, e.package.name) for e in events] == [
            ("start", 0, "a"), ("complete", 0, "a"),
            ("start", 1, "b"), ("complete", 1, "b"),
        ]
        assert events[0].outcome is None
        assert events[1].outcome.ok

    def test_report_counts(self, registry, scoop):
        scoop.installed["b"] = _installed("b", "1.0.0")
        scoop.set_failure("install", "c")

        report = reconcile([_pkg("a"), _pkg("b"), _pkg("c"), _pkg("d", by="apt")], registry)

        assert (report.total, report.succeeded, report.failed, report.skipped) == (4, 1, 1, 2)
        data = report.to_dict()
        assert data["status"] == "partial"
        assert [o["name"] for o in data["outcomes"]] == ["a", "b", "c", "d"]

    def test_empty_report_is_ok(self):
        report = ReconcileReport()
        assert report.status == "ok"


# ── End-to-end properties ───────────────────────────────────────────


class TestRoundTrip:
    def test_export_then_import_makes_no_changes(self, registry, scoop):
        scoop.installed["git"] = _installed("git", "2.40.0")
        scoop.installed["jq"] = _installed("jq", "1.7.1")
        config = DevctlConfig(packages=[
            ManagedPackage(name="git", version="2.40.0", installed_by="scoop"),
            ManagedPackage(name="jq", version="v1.7.1", installed_by="scoop"),
        ])

        manifest = export_manifest(config, "windows")
        report = reconcile(manifest.packages, registry)

        assert scoop.calls("install") == []
        assert scoop.calls("uninstall") == []
        assert report.status == "ok"
        assert _names(report.managed_packages()) == ["git", "jq"]

    def test_merge_after_run(self, registry, scoop):
        scoop.set_failure("install", "bad")
        config = DevctlConfig(packages=[
            ManagedPackage(name="old", version="1", installed_by="scoop"),
        ])

        report = reconcile([_pkg("git", "2.40.0"), _pkg("bad")], registry)
        config.merge_packages(report.managed_packages())

        assert _names(config.packages) == ["old", "git"]
        assert config.find_package("git").version == "2.40.0"

    def test_git_absent_then_upgrade(self, registry, scoop):
        report = reconcile([_pkg("git", "2.40.0")], registry)
        assert scoop.calls("install") == ["git@2.40.0"]
        assert _names(report.managed_packages()) == ["git"]

        scoop.reset()
        report = reconcile([_pkg("git", "2.41.0")], registry)
        ops = [(op, arg) for op, arg in scoop.call_log if op != "list"]
        assert ops == [("uninstall", "git"), ("install", "git@2.41.0")]

"""
Tests for core models — package sets, outcomes, reconciliation results,
profiles, and the run report.
"""

import pytest
from pydantic import ValidationError

from envsetup.core.models.outcome import FileWriteOutcome
from envsetup.core.models.profile import PackageSetSpec, SetupProfile, ToolchainSpec
from envsetup.core.models.report import SetupReport, generate_run_id
from envsetup.core.models.result import (
    DesiredPackageSet,
    PackageOutcome,
    PackageStatus,
    ReconciliationResult,
)

# ── DesiredPackageSet ────────────────────────────────────────────────


class TestDesiredPackageSet:
    def test_keeps_order(self):
        desired = DesiredPackageSet(name="apps", packages=["git", "neovim", "docker"])
        assert desired.packages == ("git", "neovim", "docker")

    def test_duplicates_collapse_to_first(self):
        desired = DesiredPackageSet(name="apps", packages=["starship", "git", "starship"])
        assert desired.packages == ("starship", "git")

    def test_blank_entries_dropped(self):
        desired = DesiredPackageSet(name="apps", packages=["git", " ", ""])
        assert desired.packages == ("git",)

    def test_single_string(self):
        assert DesiredPackageSet(name="x", packages="git").packages == ("git",)

    def test_immutable(self):
        desired = DesiredPackageSet(name="apps", packages=["git"])
        with pytest.raises(ValidationError):
            desired.name = "other"

    def test_default_kind(self):
        assert DesiredPackageSet(name="apps").kind == "default"


# ── PackageOutcome ───────────────────────────────────────────────────


class TestPackageOutcome:
    def test_present(self):
        outcome = PackageOutcome.present("git")
        assert outcome.status is PackageStatus.ALREADY_PRESENT
        assert not outcome.failed

    def test_installed_has_zero_exit(self):
        outcome = PackageOutcome.installed("git")
        assert outcome.exit_code == 0

    def test_failure_default_reason(self):
        outcome = PackageOutcome.failure("docker", 1)
        assert outcome.failed
        assert outcome.exit_code == 1
        assert outcome.reason == "exit code 1"


# ── ReconciliationResult ─────────────────────────────────────────────


class TestReconciliationResult:
    def _result(self) -> ReconciliationResult:
        result = ReconciliationResult(set_name="apps", installer="mock")
        result.record(PackageOutcome.present("git"))
        result.record(PackageOutcome.installed("neovim"))
        result.record(PackageOutcome.failure("docker", 2, "network"))
        return result

    def test_buckets(self):
        result = self._result()
        assert result.already_present == ["git"]
        assert result.installed_now == ["neovim"]
        assert result.failed == ["docker"]
        assert result.total == 3

    def test_classifying_twice_rejected(self):
        result = self._result()
        with pytest.raises(ValueError, match="already classified"):
            result.record(PackageOutcome.installed("git"))

    def test_status_partial(self):
        assert self._result().status == "partial"

    def test_status_ok(self):
        result = ReconciliationResult(set_name="apps")
        result.record(PackageOutcome.present("git"))
        assert result.status == "ok"

    def test_status_failed(self):
        result = ReconciliationResult(set_name="apps")
        result.record(PackageOutcome.failure("docker", 1))
        assert result.status == "failed"

    def test_empty_is_ok(self):
        assert ReconciliationResult(set_name="empty").status == "ok"

    def test_finalize_sets_end(self):
        result = ReconciliationResult(set_name="apps")
        assert result.ended_at == ""
        assert result.finalize().ended_at

    def test_to_dict(self):
        data = self._result().to_dict()
        assert data["set"] == "apps"
        assert data["failed"] == [{"name": "docker", "exit_code": 2, "reason": "network"}]


# ── Profile models ───────────────────────────────────────────────────


class TestProfileModels:
    def test_package_set_desired(self):
        spec = PackageSetSpec(name="casks", kind="cask", packages=["wezterm", "wezterm"])
        desired = spec.desired()
        assert desired.kind == "cask"
        assert desired.packages == ("wezterm",)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            PackageSetSpec(name="x", kind="flatpak")

    def test_toolchain_desired_name(self):
        spec = ToolchainSpec(tools=["cargo-edit"])
        assert spec.desired().name == "rust-tools"
        assert spec.desired().packages == ("cargo-edit",)

    def test_manager_must_match_platform(self):
        with pytest.raises(ValidationError, match="not available"):
            SetupProfile(platform="windows", package_manager="homebrew")

    def test_cask_requires_homebrew(self):
        with pytest.raises(ValidationError, match="cask"):
            SetupProfile(
                platform="windows",
                package_manager="scoop",
                package_sets=[PackageSetSpec(name="apps", kind="cask", packages=["wezterm"])],
            )

    def test_valid_profile(self):
        profile = SetupProfile(
            platform="windows",
            package_manager="scoop",
            package_sets=[PackageSetSpec(name="apps", packages=["git"])],
        )
        assert [s.name for s in profile.package_sets] == ["apps"]
        assert profile.prerequisites is True
        assert profile.require_elevation is False


# ── SetupReport ──────────────────────────────────────────────────────


class TestSetupReport:
    def test_run_id_format(self):
        run_id = generate_run_id()
        assert run_id.startswith("run-")
        assert len(run_id.split("-")) == 4

    def test_counts(self):
        report = SetupReport()
        result = ReconciliationResult(set_name="apps")
        result.record(PackageOutcome.present("git"))
        result.record(PackageOutcome.installed("neovim"))
        result.record(PackageOutcome.failure("docker", 1))
        report.reconciliations.append(result)
        assert report.present_count == 1
        assert report.installed_count == 1
        assert [o.name for o in report.failed_outcomes] == ["docker"]
        assert report.status == "partial"
        assert report.exit_code == 0

    def test_abort(self):
        report = SetupReport()
        report.abort("package-manager", "boom", remedy="try again")
        assert report.aborted
        assert report.exit_code == 1
        assert report.status == "failed"
        assert report.should_record

    def test_privilege_abort_not_recorded(self):
        report = SetupReport()
        report.abort("privilege", "not elevated")
        assert not report.should_record

    def test_to_dict(self):
        report = SetupReport(platform="macos", package_manager="homebrew")
        report.add_stage("packages", "ok")
        data = report.finish().to_dict()
        assert data["status"] == "ok"
        assert data["stages"] == [{"name": "packages", "status": "ok", "message": ""}]
        assert data["ended_at"]


class TestFileWriteOutcome:
    def test_changed(self):
        assert FileWriteOutcome.CREATED.changed
        assert FileWriteOutcome.APPENDED.changed
        assert not FileWriteOutcome.LEFT_UNTOUCHED.changed

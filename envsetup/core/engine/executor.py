"""
Setup executor — runs the stages in their fixed order.

Flow:
    privilege → prerequisites → package manager → packages → toolchain → profiles

Each stage depends on the side effects of the one before it (binaries on
the search path).  A ``FatalPrerequisiteMissing`` stops the run where it
is; everything else is recorded and the run continues.  Nothing already
done is undone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from envsetup.adapters.base import PackageManager
from envsetup.adapters.registry import AdapterRegistry, default_registry
from envsetup.adapters.shell.command import CommandRunner
from envsetup.adapters.shell.filesystem import FileEditor
from envsetup.core.context import RunContext
from envsetup.core.engine.bootstrap import ensure_package_manager
from envsetup.core.engine.events import RunListener
from envsetup.core.engine.prerequisites import ensure_compiler_toolchain
from envsetup.core.engine.privilege import is_elevated, require_elevation
from envsetup.core.engine.profiles import apply_profile_edits
from envsetup.core.engine.reconciler import Reconciler
from envsetup.core.engine.toolchain import configure_mirror, ensure_toolchain
from envsetup.core.errors import FatalPrerequisiteMissing
from envsetup.core.models.outcome import (
    ManagerStatus,
    MirrorStatus,
    PrerequisiteStatus,
)
from envsetup.core.models.profile import SetupProfile
from envsetup.core.models.report import SetupReport

logger = logging.getLogger(__name__)

STAGE_TITLES = {
    "privilege": "Checking privileges",
    "prerequisites": "Compiler toolchain",
    "package-manager": "Package manager",
    "packages": "Packages",
    "toolchain": "Toolchain",
    "profiles": "Shell profiles",
}


class SetupExecutor:
    """Run a ``SetupProfile`` against the machine described by ``context``.

    Args:
        profile: Desired state.
        context: Run context (platform, home, env overrides, search path).
        runner: Command runner; defaults to one bound to ``context``.
        registry: Adapter factories; defaults to the real adapters.
        editor: File editor for mirror config and shell profiles.
        listener: Progress hooks.
        elevation_check: Privilege probe (injectable for tests).
        skip_profiles: Do not touch shell profiles.
    """

    def __init__(
        self,
        profile: SetupProfile,
        context: RunContext,
        *,
        runner: CommandRunner | None = None,
        registry: AdapterRegistry | None = None,
        editor: FileEditor | None = None,
        listener: RunListener | None = None,
        elevation_check: Callable[[], bool] | None = None,
        skip_profiles: bool = False,
    ):
        self.profile = profile
        self.context = context
        self.runner = runner or CommandRunner(context)
        self.registry = registry or default_registry()
        self.editor = editor or FileEditor()
        self.listener = listener or RunListener()
        self.elevation_check = elevation_check or is_elevated
        self.skip_profiles = skip_profiles

        self.reconciler = Reconciler(on_outcome=self.listener.package_classified)
        self._manager: PackageManager | None = None

    def run(self) -> SetupReport:
        report = SetupReport(
            platform=self.profile.platform,
            package_manager=self.profile.package_manager,
        )
        logger.info("Starting setup run %s (%s)", report.run_id, self.profile.platform)

        try:
            self._stage_privilege(report)
            self._stage_prerequisites(report)
            self._stage_package_manager(report)
            self._stage_packages(report)
            self._stage_toolchain(report)
            self._stage_profiles(report)
        except FatalPrerequisiteMissing as e:
            logger.error("Setup aborted at %s: %s", e.stage, e.message)
            report.abort(e.stage, e.message, remedy=e.remedy, exit_code=e.exit_code)
            self._finish_stage(report, e.stage, "failed", e.message)

        report.finish()
        logger.info(
            "Setup run %s finished: %s (%d installed, %d present, %d failed)",
            report.run_id,
            report.status,
            report.installed_count,
            report.present_count,
            len(report.failed_outcomes),
        )
        return report

    # ── Stages ──────────────────────────────────────────────────

    def _start_stage(self, name: str) -> None:
        self.listener.stage_started(name, STAGE_TITLES.get(name, name))

    def _finish_stage(self, report: SetupReport, name: str, status: str, message: str = "") -> None:
        record = report.add_stage(name, status, message)
        self.listener.stage_finished(record)

    def _stage_privilege(self, report: SetupReport) -> None:
        if not self.profile.require_elevation:
            logger.debug("Profile does not require elevation")
            return
        self._start_stage("privilege")
        require_elevation(self.profile.platform, check=self.elevation_check)
        self._finish_stage(report, "privilege", "ok", "elevated")

    def _stage_prerequisites(self, report: SetupReport) -> None:
        if not self.profile.prerequisites:
            self._finish_stage(report, "prerequisites", "skipped", "disabled in profile")
            return
        self._start_stage("prerequisites")
        status = ensure_compiler_toolchain(self.runner, self.listener.wait_for_operator)
        if status is PrerequisiteStatus.ALREADY_INSTALLED:
            self._finish_stage(report, "prerequisites", "ok", "already installed")
        elif status is PrerequisiteStatus.INSTALL_TRIGGERED:
            self._finish_stage(
                report, "prerequisites", "warning", "installer started, not re-verified",
            )
        else:
            self._finish_stage(report, "prerequisites", "warning", "installer could not be started")

    def _stage_package_manager(self, report: SetupReport) -> None:
        self._start_stage("package-manager")
        manager = self.registry.create_manager(self.profile.package_manager, self.runner)
        status, update_ok = ensure_package_manager(manager, self.context)
        self._manager = manager

        if status is ManagerStatus.INSTALLED_FRESH:
            self._finish_stage(report, "package-manager", "ok", f"{manager.name} installed")
        elif update_ok:
            self._finish_stage(report, "package-manager", "ok", f"{manager.name} updated")
        else:
            self._finish_stage(
                report, "package-manager", "warning", f"{manager.name} update failed",
            )

    def _stage_packages(self, report: SetupReport) -> None:
        assert self._manager is not None
        self._start_stage("packages")

        added = self.reconciler.ensure_sources(self._manager, self.profile.sources)
        for package_set in self.profile.package_sets:
            installer = self._manager.for_kind(package_set.kind)
            result = self.reconciler.reconcile(package_set.desired(), installer)
            report.reconciliations.append(result)
            self.listener.set_finished(result)

        failed = [o for r in report.reconciliations for o in r.failed_outcomes]
        message = f"{len(added)} source(s) added" if added else ""
        self._finish_stage(report, "packages", "warning" if failed else "ok", message)

    def _stage_toolchain(self, report: SetupReport) -> None:
        spec = self.profile.toolchain
        if spec is None or not spec.enabled:
            return
        assert self._manager is not None
        self._start_stage("toolchain")

        mirror_status = configure_mirror(spec.mirror, self.context, self.editor)
        toolchain = self.registry.create_toolchain(
            spec.name, self.runner, self._manager, spec.installer_package,
        )
        status, update_ok = ensure_toolchain(toolchain, self.context)

        result = self.reconciler.reconcile(spec.desired(), toolchain.installer())
        report.reconciliations.append(result)
        self.listener.set_finished(result)

        parts = [
            "mirror configured" if mirror_status is MirrorStatus.CONFIGURED
            else "mirror config left untouched",
            "installed" if status is ManagerStatus.INSTALLED_FRESH
            else "updated" if update_ok else "update failed",
        ]
        degraded = not update_ok or bool(result.failed)
        self._finish_stage(report, "toolchain", "warning" if degraded else "ok", ", ".join(parts))

    def _stage_profiles(self, report: SetupReport) -> None:
        if self.skip_profiles or not self.profile.profiles:
            self._finish_stage(report, "profiles", "skipped", "")
            return
        self._start_stage("profiles")
        edits = apply_profile_edits(
            self.profile.profiles, self.context, self.editor, on_edit=self.listener.file_edited,
        )
        report.profile_edits.extend(edits)
        changed = sum(1 for e in edits if e.outcome.changed)
        self._finish_stage(report, "profiles", "ok", f"{changed} edit(s) applied")


def run_setup(
    profile: SetupProfile,
    context: RunContext | None = None,
    **kwargs,
) -> SetupReport:
    """Convenience wrapper: build an executor and run it."""
    context = context or RunContext(platform=profile.platform)
    return SetupExecutor(profile, context, **kwargs).run()

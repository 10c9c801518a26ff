"""
Plan use case — show what a run would install, without installing.

Queries installed state read-only.  When the package manager (or the
toolchain) is not installed yet, every package in its sets is reported
as missing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from envsetup.adapters.base import Installer
from envsetup.adapters.registry import AdapterRegistry, default_registry
from envsetup.adapters.shell.command import CommandRunner
from envsetup.core.context import RunContext
from envsetup.core.models.profile import SetupProfile
from envsetup.core.models.result import DesiredPackageSet

logger = logging.getLogger(__name__)


@dataclass
class SetPlan:
    """Present/missing split for one package set."""

    name: str
    installer: str
    available: bool = True
    present: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "set": self.name,
            "installer": self.installer,
            "available": self.available,
            "present": self.present,
            "missing": self.missing,
        }


@dataclass
class PlanResult:
    platform: str = ""
    package_manager: str = ""
    manager_available: bool = False
    sets: list[SetPlan] = field(default_factory=list)

    @property
    def missing_count(self) -> int:
        return sum(len(s.missing) for s in self.sets)

    def to_dict(self) -> dict:
        return {
            "platform": self.platform,
            "package_manager": self.package_manager,
            "manager_available": self.manager_available,
            "missing": self.missing_count,
            "sets": [s.to_dict() for s in self.sets],
        }


def _split(desired: DesiredPackageSet, installer: Installer | None, name: str) -> SetPlan:
    plan = SetPlan(name=desired.name, installer=name, available=installer is not None)
    for package in desired.packages:
        if installer is not None and installer.is_installed(package):
            plan.present.append(package)
        else:
            plan.missing.append(package)
    return plan


def build_plan(
    profile: SetupProfile,
    context: RunContext | None = None,
    *,
    runner: CommandRunner | None = None,
    registry: AdapterRegistry | None = None,
) -> PlanResult:
    context = context or RunContext(platform=profile.platform)
    runner = runner or CommandRunner(context)
    registry = registry or default_registry()

    manager = registry.create_manager(profile.package_manager, runner)
    result = PlanResult(
        platform=profile.platform,
        package_manager=profile.package_manager,
        manager_available=manager.is_available(),
    )

    for package_set in profile.package_sets:
        installer = manager.for_kind(package_set.kind)
        result.sets.append(
            _split(
                package_set.desired(),
                installer if result.manager_available else None,
                installer.name,
            )
        )

    spec = profile.toolchain
    if spec is not None and spec.enabled:
        toolchain = registry.create_toolchain(spec.name, runner, manager, spec.installer_package)
        for directory in toolchain.bin_dirs():
            context.prepend_path(directory)
        tools = toolchain.installer()
        available = toolchain.is_available()
        result.sets.append(_split(spec.desired(), tools if available else None, tools.name))

    logger.info("Plan: %d package(s) missing", result.missing_count)
    return result

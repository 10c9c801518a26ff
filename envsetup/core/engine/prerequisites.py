"""
Prerequisite installer — native compiler toolchain.

    macOS    Xcode Command Line Tools   probe: xcode-select -p
    Windows  VS Build Tools (MSVC)      probe: vswhere.exe

Both installers need the operator to click through a dialog.  After
triggering one we block on ``wait_for_operator`` and then carry on
without re-checking: the operator's "done" is trusted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from envsetup.adapters.shell.command import CommandRunner
from envsetup.core.models.outcome import PrerequisiteStatus

logger = logging.getLogger(__name__)

OperatorWait = Callable[[str], None]

VC_TOOLS_COMPONENT = "Microsoft.VisualStudio.Component.VC.Tools.x86.x64"
BUILD_TOOLS_ID = "Microsoft.VisualStudio.2022.BuildTools"
BUILD_TOOLS_OVERRIDE = (
    "--wait --passive --add Microsoft.VisualStudio.Workload.VCTools --includeRecommended"
)


def _vswhere_path(runner: CommandRunner) -> Path:
    ctx = runner.context
    program_files = ctx.getenv("ProgramFiles(x86)") or r"C:\Program Files (x86)"
    return Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"


def has_compiler_toolchain(runner: CommandRunner) -> bool:
    """Platform-specific presence probe."""
    ctx = runner.context
    if ctx.platform == "macos":
        return runner.run(["xcode-select", "-p"]).ok

    if ctx.is_windows:
        vswhere = _vswhere_path(runner)
        if not vswhere.is_file():
            return False
        result = runner.run([
            str(vswhere), "-latest", "-products", "*",
            "-requires", VC_TOOLS_COMPONENT,
            "-property", "installationPath",
        ])
        return result.ok and bool(result.stdout.strip())

    logger.debug("No compiler probe for platform '%s'", ctx.platform)
    return True


def _trigger_install(runner: CommandRunner) -> tuple[bool, str]:
    """Start the platform installer. Returns (started, operator prompt)."""
    if runner.context.platform == "macos":
        result = runner.run(["xcode-select", "--install"])
        prompt = "Finish the Xcode Command Line Tools installer, then press Enter to continue"
    else:
        result = runner.run(
            [
                "winget", "install", "--id", BUILD_TOOLS_ID, "-e",
                "--accept-package-agreements", "--accept-source-agreements",
                "--override", BUILD_TOOLS_OVERRIDE,
            ],
            capture=False,
        )
        prompt = "Finish the Visual Studio Build Tools installer, then press Enter to continue"

    if not result.ok:
        logger.warning(
            "Compiler toolchain installer did not start: %s", result.error_summary()
        )
    return result.ok, prompt


def ensure_compiler_toolchain(
    runner: CommandRunner,
    wait_for_operator: OperatorWait | None = None,
) -> PrerequisiteStatus:
    """Make sure a native compiler toolchain is present.

    Returns:
        ALREADY_INSTALLED if the probe succeeds, INSTALL_TRIGGERED once the
        installer was started and the operator confirmed, FAILED if the
        installer could not be started.  None of these stop the run.
    """
    if has_compiler_toolchain(runner):
        logger.info("Compiler toolchain already installed")
        return PrerequisiteStatus.ALREADY_INSTALLED

    started, prompt = _trigger_install(runner)
    if not started:
        return PrerequisiteStatus.FAILED

    if wait_for_operator is not None:
        wait_for_operator(prompt)
    return PrerequisiteStatus.INSTALL_TRIGGERED

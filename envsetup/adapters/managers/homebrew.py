"""
Homebrew adapter — formulas, casks and taps on macOS.

Formulas and casks are separate package kinds; ``for_kind("cask")``
returns a sibling adapter that adds ``--cask`` to queries and installs.
"""

from __future__ import annotations

import logging

from envsetup.adapters.base import PackageManager
from envsetup.adapters.shell.command import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

# Prefixes used by the official installer
_PREFIX_APPLE_SILICON = "/opt/homebrew"
_PREFIX_INTEL = "/usr/local"


class HomebrewManager(PackageManager):
    """Homebrew client.

    Args:
        runner: Command runner bound to the run context.
        cask: Operate on casks (GUI apps) instead of formulas.
    """

    command = "brew"

    def __init__(self, runner: CommandRunner, *, cask: bool = False):
        self._runner = runner
        self._cask = cask

    @property
    def name(self) -> str:
        return "homebrew-cask" if self._cask else "homebrew"

    @property
    def _kind_flag(self) -> str:
        return "--cask" if self._cask else "--formula"

    def is_available(self) -> bool:
        return self._runner.context.which(self.command) is not None

    def installed(self) -> set[str]:
        result = self._runner.run([self.command, "list", self._kind_flag, "-1"])
        if not result.ok:
            logger.warning("brew list %s failed: %s", self._kind_flag, result.error_summary())
            return set()
        return {line.strip() for line in result.lines}

    def is_installed(self, package: str) -> bool:
        # `brew list <name>` resolves aliases (python → python@3.x)
        return self._runner.run([self.command, "list", self._kind_flag, package]).ok

    def install(self, package: str) -> CommandResult:
        cmd = [self.command, "install"]
        if self._cask:
            cmd.append("--cask")
        cmd.append(package)
        return self._runner.run(cmd, capture=False)

    def update(self) -> CommandResult:
        return self._runner.run([self.command, "update"], capture=False)

    def bootstrap(self) -> CommandResult:
        script = f'/bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"'
        return self._runner.run(["/bin/bash", "-c", script], capture=False)

    def list_sources(self) -> set[str]:
        result = self._runner.run([self.command, "tap"])
        if not result.ok:
            logger.warning("brew tap failed: %s", result.error_summary())
            return set()
        return {line.strip() for line in result.lines}

    def add_source(self, source: str) -> CommandResult:
        return self._runner.run([self.command, "tap", source], capture=False)

    def bin_dirs(self) -> list[str]:
        prefix = _PREFIX_APPLE_SILICON if self._runner.context.is_apple_silicon else _PREFIX_INTEL
        return [f"{prefix}/bin", f"{prefix}/sbin"]

    def for_kind(self, kind: str) -> PackageManager:
        if kind == "cask":
            return self if self._cask else HomebrewManager(self._runner, cask=True)
        if kind == "default":
            return HomebrewManager(self._runner) if self._cask else self
        raise ValueError(f"homebrew does not support package kind '{kind}'")

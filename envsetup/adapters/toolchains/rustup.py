"""
Rust toolchain adapter — rustup for the toolchain, cargo for tools.

Bootstrap order:
    1. If ``rustup-init`` is missing, install the OS package that provides
       it (``rustup-init`` on Homebrew, ``rustup`` on Scoop).
    2. If that package already set up ``rustup`` (Scoop does), done.
    3. Otherwise run ``rustup-init -y --no-modify-path``.

Mirror variables (RUSTUP_DIST_SERVER, RUSTUP_UPDATE_ROOT) must already
be on the run context: rustup-init reads them while downloading.
"""

from __future__ import annotations

import logging
from pathlib import Path

from envsetup.adapters.base import Installer, PackageManager, Toolchain
from envsetup.adapters.shell.command import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


class CargoInstaller(Installer):
    """``cargo install`` as a package installer."""

    command = "cargo"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @property
    def name(self) -> str:
        return "cargo"

    def installed(self) -> set[str]:
        """Crates from ``cargo install --list``.

        Output is ``name vX.Y.Z:`` per crate followed by indented binaries.
        """
        result = self._runner.run([self.command, "install", "--list"])
        if not result.ok:
            logger.warning("cargo install --list failed: %s", result.error_summary())
            return set()
        names: set[str] = set()
        for line in result.stdout.splitlines():
            if line and not line[0].isspace():
                names.add(line.split()[0])
        return names

    def install(self, package: str) -> CommandResult:
        return self._runner.run([self.command, "install", package], capture=False)


class RustupToolchain(Toolchain):
    """rustup-managed Rust toolchain.

    Args:
        runner: Command runner bound to the run context.
        package_manager: OS package manager used to fetch ``rustup-init``.
        installer_package: Name of the OS package providing it.
    """

    command = "rustup"

    def __init__(
        self,
        runner: CommandRunner,
        package_manager: PackageManager | None = None,
        installer_package: str = "",
    ):
        self._runner = runner
        self._package_manager = package_manager
        self._installer_package = installer_package

    @property
    def name(self) -> str:
        return "rust"

    @property
    def cargo_home(self) -> Path:
        ctx = self._runner.context
        configured = ctx.getenv("CARGO_HOME")
        return Path(configured) if configured else ctx.home / ".cargo"

    def is_available(self) -> bool:
        return self._runner.context.which(self.command) is not None

    def update(self) -> CommandResult:
        return self._runner.run([self.command, "update"], capture=False)

    def bootstrap(self, non_interactive: bool = True) -> CommandResult:
        ctx = self._runner.context

        if ctx.which("rustup-init") is None and self._package_manager and self._installer_package:
            logger.info(
                "rustup-init not found, installing '%s' via %s",
                self._installer_package,
                self._package_manager.name,
            )
            provided = self._package_manager.install(self._installer_package)
            if not provided.ok:
                return provided

        if self.is_available():
            # The OS package already ran rustup-init for us
            return CommandResult(command=[self.command], return_code=0)

        cmd = ["rustup-init"]
        if non_interactive:
            cmd.append("-y")
        cmd.append("--no-modify-path")
        return self._runner.run(cmd, capture=False)

    def bin_dirs(self) -> list[str]:
        return [str(self.cargo_home / "bin")]

    def installer(self) -> Installer:
        return CargoInstaller(self._runner)

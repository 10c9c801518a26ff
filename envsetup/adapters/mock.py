"""
Mock adapters — scripted stand-ins for package managers and toolchains.

Used by tests to exercise the engine without touching real tools.
Every install succeeds unless configured otherwise, and successful
installs are reflected in ``installed()`` so later checks in the same
run see them.
"""

from __future__ import annotations

from envsetup.adapters.base import Installer, PackageManager, Toolchain
from envsetup.adapters.shell.command import CommandResult
from envsetup.core.context import RunContext


def _result(*cmd: str, code: int = 0, stderr: str = "") -> CommandResult:
    return CommandResult(command=list(cmd), return_code=code, stderr=stderr)


class MockInstaller(Installer):
    """Installer with configurable exit codes per package."""

    def __init__(
        self,
        installer_name: str = "mock",
        installed: set[str] | list[str] | tuple[str, ...] = (),
        exit_codes: dict[str, int] | None = None,
    ):
        self._name = installer_name
        self._installed: set[str] = set(installed)
        self._exit_codes: dict[str, int] = dict(exit_codes or {})
        self._call_log: list[str] = []
        self.query_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[str]:
        """Packages ``install`` was called with, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_failure(self, package: str, exit_code: int = 1) -> None:
        """Configure a specific package to fail with ``exit_code``."""
        self._exit_codes[package] = exit_code

    def installed(self) -> set[str]:
        self.query_count += 1
        return set(self._installed)

    def install(self, package: str) -> CommandResult:
        self._call_log.append(package)
        code = self._exit_codes.get(package, 0)
        if code == 0:
            self._installed.add(package)
            return _result(self._name, "install", package)
        return _result(self._name, "install", package, code=code, stderr=f"[mock] {package} failed")

    def reset(self) -> None:
        """Clear call log and failure configuration."""
        self._call_log.clear()
        self._exit_codes.clear()


class MockPackageManager(MockInstaller, PackageManager):
    """Package manager double with scripted bootstrap/update/source results."""

    command = "mock-pm"

    def __init__(
        self,
        installer_name: str = "mock-pm",
        *,
        available: bool = True,
        installed: set[str] | list[str] | tuple[str, ...] = (),
        exit_codes: dict[str, int] | None = None,
        sources: set[str] | list[str] | tuple[str, ...] = (),
        bootstrap_exit_code: int = 0,
        update_exit_code: int = 0,
        bin_dir: str = "/mock/bin",
    ):
        super().__init__(installer_name, installed=installed, exit_codes=exit_codes)
        self._available = available
        self._sources: set[str] = set(sources)
        self._bootstrap_exit_code = bootstrap_exit_code
        self._update_exit_code = update_exit_code
        self._bin_dir = bin_dir
        self.bootstrap_calls = 0
        self.update_calls = 0
        self.added_sources: list[str] = []

    def is_available(self) -> bool:
        return self._available

    def update(self) -> CommandResult:
        self.update_calls += 1
        return _result(self.command, "update", code=self._update_exit_code)

    def bootstrap(self) -> CommandResult:
        self.bootstrap_calls += 1
        if self._bootstrap_exit_code == 0:
            self._available = True
        return _result(self.command, "bootstrap", code=self._bootstrap_exit_code)

    def list_sources(self) -> set[str]:
        return set(self._sources)

    def add_source(self, source: str) -> CommandResult:
        self.added_sources.append(source)
        self._sources.add(source)
        return _result(self.command, "add-source", source)

    def bin_dirs(self) -> list[str]:
        return [self._bin_dir]

    def for_kind(self, kind: str) -> PackageManager:
        return self


class MockToolchain(Toolchain):
    """Toolchain double wrapping a ``MockInstaller`` for its tools."""

    def __init__(
        self,
        *,
        available: bool = True,
        bootstrap_exit_code: int = 0,
        update_exit_code: int = 0,
        tools: MockInstaller | None = None,
        bin_dir: str = "/mock/cargo/bin",
        context: RunContext | None = None,
    ):
        self._available = available
        self._bootstrap_exit_code = bootstrap_exit_code
        self._update_exit_code = update_exit_code
        self._tools = tools or MockInstaller("mock-cargo")
        self._bin_dir = bin_dir
        self._context = context
        self.bootstrap_calls = 0
        self.update_calls = 0
        self.bootstrap_env: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "mock-rust"

    def is_available(self) -> bool:
        return self._available

    def update(self) -> CommandResult:
        self.update_calls += 1
        return _result("rustup", "update", code=self._update_exit_code)

    def bootstrap(self, non_interactive: bool = True) -> CommandResult:
        self.bootstrap_calls += 1
        if self._context is not None:
            # mirror variables visible to the installer at this moment
            self.bootstrap_env = dict(self._context.env_overrides)
        if self._bootstrap_exit_code == 0:
            self._available = True
        return _result("rustup-init", "-y", code=self._bootstrap_exit_code)

    def bin_dirs(self) -> list[str]:
        return [self._bin_dir]

    def installer(self) -> Installer:
        return self._tools

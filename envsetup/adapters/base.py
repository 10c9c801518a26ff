"""
Adapter base — the capability contracts between the engine and tools.

The reconciler only needs an ``Installer``: something that can say
whether a package is installed and install one.  OS package managers
(Scoop, Homebrew) and cargo all satisfy it, which is what lets the same
reconciliation loop drive both the OS package list and the Rust tools.

    Installer        name, installed(), is_installed(), install()
    PackageManager   + is_available(), update(), bootstrap(),
                       list_sources(), add_source(), bin_dirs(), for_kind()
    Toolchain        is_available(), update(), bootstrap(), bin_dirs(),
                       installer()

Adapters never raise for a failing command: they return the
``CommandResult`` and let the engine decide whether it is fatal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from envsetup.adapters.shell.command import CommandResult


class Installer(ABC):
    """Anything that can install named packages."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier used in logs and reports (e.g. 'homebrew', 'cargo')."""

    @abstractmethod
    def installed(self) -> set[str]:
        """Query the currently installed package names."""

    def is_installed(self, package: str) -> bool:
        """Live check for a single package.

        Subclasses override this when the tool has a cheaper or
        alias-aware per-package query.
        """
        return package in self.installed()

    @abstractmethod
    def install(self, package: str) -> CommandResult:
        """Install one package. Blocks until the tool exits."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class PackageManager(Installer):
    """An OS-level package manager with package sources (buckets/taps)."""

    #: entry-point command looked up on the search path
    command: str = ""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the entry-point command resolves on the search path."""

    @abstractmethod
    def update(self) -> CommandResult:
        """Self-update the manager and its package definitions."""

    @abstractmethod
    def bootstrap(self) -> CommandResult:
        """Install the manager itself."""

    @abstractmethod
    def list_sources(self) -> set[str]:
        """Registered package sources (buckets / taps)."""

    @abstractmethod
    def add_source(self, source: str) -> CommandResult:
        """Register a package source."""

    def bin_dirs(self) -> list[str]:
        """Directories to put on the search path after a fresh bootstrap."""
        return []

    def for_kind(self, kind: str) -> PackageManager:
        """Return the installer variant for a package kind.

        Only ``default`` is supported unless the manager overrides this.
        """
        if kind == "default":
            return self
        raise ValueError(f"{self.name} does not support package kind '{kind}'")


class Toolchain(ABC):
    """A secondary toolchain with its own installer (rustup + cargo)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Toolchain identifier."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the toolchain manager resolves on the search path."""

    @abstractmethod
    def update(self) -> CommandResult:
        """Update an existing toolchain."""

    @abstractmethod
    def bootstrap(self, non_interactive: bool = True) -> CommandResult:
        """Install the toolchain. Reads mirror env vars at this point."""

    @abstractmethod
    def bin_dirs(self) -> list[str]:
        """Directories holding the toolchain's binaries."""

    @abstractmethod
    def installer(self) -> Installer:
        """The toolchain's own package installer (e.g. cargo install)."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"

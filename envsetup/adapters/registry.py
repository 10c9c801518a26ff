"""
Adapter registry — maps configured names to adapter factories.

The engine never instantiates Homebrew/Scoop/rustup directly: it asks
the registry for ``package_manager`` and ``toolchain.name`` from the
profile.  Tests register mock factories under the same names.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from envsetup.adapters.base import PackageManager, Toolchain
from envsetup.adapters.shell.command import CommandRunner

logger = logging.getLogger(__name__)

ManagerFactory = Callable[[CommandRunner], PackageManager]
ToolchainFactory = Callable[[CommandRunner, PackageManager, str], Toolchain]


class AdapterRegistry:
    """Registry of package-manager and toolchain factories."""

    def __init__(self) -> None:
        self._managers: dict[str, ManagerFactory] = {}
        self._toolchains: dict[str, ToolchainFactory] = {}

    def register_manager(self, name: str, factory: ManagerFactory) -> None:
        if name in self._managers:
            logger.warning("Overwriting existing package manager: %s", name)
        self._managers[name] = factory
        logger.debug("Registered package manager: %s", name)

    def register_toolchain(self, name: str, factory: ToolchainFactory) -> None:
        if name in self._toolchains:
            logger.warning("Overwriting existing toolchain: %s", name)
        self._toolchains[name] = factory
        logger.debug("Registered toolchain: %s", name)

    def create_manager(self, name: str, runner: CommandRunner) -> PackageManager:
        factory = self._managers.get(name)
        if factory is None:
            raise KeyError(f"No package manager registered for '{name}'")
        return factory(runner)

    def create_toolchain(
        self,
        name: str,
        runner: CommandRunner,
        manager: PackageManager,
        installer_package: str = "",
    ) -> Toolchain:
        factory = self._toolchains.get(name)
        if factory is None:
            raise KeyError(f"No toolchain registered for '{name}'")
        return factory(runner, manager, installer_package)


def default_registry() -> AdapterRegistry:
    """Registry with the real Homebrew, Scoop and rustup adapters."""
    from envsetup.adapters.managers.homebrew import HomebrewManager
    from envsetup.adapters.managers.scoop import ScoopManager
    from envsetup.adapters.toolchains.rustup import RustupToolchain

    registry = AdapterRegistry()
    registry.register_manager("homebrew", HomebrewManager)
    registry.register_manager("scoop", ScoopManager)
    registry.register_toolchain("rust", RustupToolchain)
    return registry

"""Adapters — bindings for package managers, toolchains and files.

Public re-exports for convenient access.
"""

from envsetup.adapters.base import Installer, PackageManager, Toolchain
from envsetup.adapters.mock import MockInstaller, MockPackageManager, MockToolchain
from envsetup.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "AdapterRegistry",
    "Installer",
    "MockInstaller",
    "MockPackageManager",
    "MockToolchain",
    "PackageManager",
    "Toolchain",
    "default_registry",
]

"""
SetupProfile model — the declarative description of a machine.

Loaded from setup.yml (or a built-in profile), this is the desired
state: which package manager, which buckets/taps, which packages, which
toolchain mirror, and which shell profile lines.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from envsetup.core.models.result import DesiredPackageSet

_MANAGER_PLATFORMS = {
    "homebrew": "macos",
    "scoop": "windows",
}


class PackageSetSpec(BaseModel):
    """A named list of packages installed through the OS package manager."""

    name: str
    kind: Literal["default", "cask"] = "default"
    packages: list[str] = Field(default_factory=list)

    def desired(self) -> DesiredPackageSet:
        return DesiredPackageSet(name=self.name, kind=self.kind, packages=self.packages)


class MirrorSpec(BaseModel):
    """Mirror endpoints for a toolchain.

    ``env`` is applied to the run before the toolchain bootstrap.
    ``config_file`` is written from ``config_template`` only when neither
    it nor any of ``config_aliases`` exists.
    """

    env: dict[str, str] = Field(default_factory=dict)
    config_file: str = ""
    config_aliases: list[str] = Field(default_factory=list)
    config_template: str = ""


class ToolchainSpec(BaseModel):
    """Secondary toolchain (rustup + cargo) and the tools it installs."""

    name: Literal["rust"] = "rust"
    enabled: bool = True
    installer_package: str = ""     # OS package providing rustup-init
    mirror: MirrorSpec = Field(default_factory=MirrorSpec)
    tools: list[str] = Field(default_factory=list)

    def desired(self) -> DesiredPackageSet:
        return DesiredPackageSet(name=f"{self.name}-tools", packages=self.tools)


class ProfileEditSpec(BaseModel):
    """Lines to append to a shell profile.

    With a ``marker``, the lines form one block that is appended only if
    the file does not already contain the marker.  Without one, every line
    guards itself.
    """

    path: str
    lines: list[str] = Field(default_factory=list)
    marker: str = ""
    comment: str = ""


class SetupProfile(BaseModel):
    """Root setup description — loaded from setup.yml."""

    version: int = 1

    name: str = ""
    platform: Literal["macos", "windows"]
    package_manager: Literal["homebrew", "scoop"]
    require_elevation: bool = False
    prerequisites: bool = True

    sources: list[str] = Field(default_factory=list)
    package_sets: list[PackageSetSpec] = Field(default_factory=list)
    toolchain: ToolchainSpec | None = None
    profiles: list[ProfileEditSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _manager_matches_platform(self) -> SetupProfile:
        expected = _MANAGER_PLATFORMS[self.package_manager]
        if expected != self.platform:
            raise ValueError(
                f"package_manager '{self.package_manager}' is not available on '{self.platform}'"
            )
        for package_set in self.package_sets:
            if package_set.kind == "cask" and self.package_manager != "homebrew":
                raise ValueError(
                    f"package set '{package_set.name}' uses kind 'cask', "
                    f"which {self.package_manager} does not support"
                )
        return self


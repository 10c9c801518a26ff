"""
Config check use case — validate setup.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from envsetup.core.config.loader import ConfigError, resolve_profile
from envsetup.core.models.profile import SetupProfile


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    profile: SetupProfile | None = None
    config_path: Path | None = None
    builtin: bool = False
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        profile = self.profile
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "builtin": self.builtin,
            "errors": self.errors,
            "warnings": self.warnings,
            "profile_name": profile.name if profile else None,
            "platform": profile.platform if profile else None,
            "package_manager": profile.package_manager if profile else None,
            "package_sets": {
                s.name: len(s.packages) for s in profile.package_sets
            } if profile else {},
        }


def check_config(
    config_path: Path | None = None,
    platform: str | None = None,
) -> ConfigCheckResult:
    """Validate a setup profile and report issues."""
    result = ConfigCheckResult()

    try:
        profile, loaded_from = resolve_profile(config_path, platform)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.profile = profile
    result.config_path = loaded_from
    result.builtin = loaded_from is None

    if not profile.package_sets:
        result.warnings.append("No package sets defined. Only the package manager will be set up.")

    set_names = [s.name for s in profile.package_sets]
    dupes = {n for n in set_names if set_names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate package set names: {', '.join(sorted(dupes))}")

    for package_set in profile.package_sets:
        if not package_set.packages:
            result.warnings.append(f"Package set '{package_set.name}' is empty.")
        names = package_set.packages
        repeated = sorted({n for n in names if names.count(n) > 1})
        if repeated:
            result.warnings.append(
                f"Package set '{package_set.name}' lists {', '.join(repeated)} more than once."
            )

    toolchain = profile.toolchain
    if toolchain is not None and toolchain.enabled:
        mirror = toolchain.mirror
        if mirror.config_file and not mirror.config_template:
            result.warnings.append(
                "toolchain.mirror.config_file is set without config_template; nothing will be written."
            )
        if not toolchain.tools:
            result.warnings.append("Toolchain enabled with no tools to install.")

    for spec in profile.profiles:
        if not spec.lines:
            result.warnings.append(f"Profile edit for {spec.path} has no lines.")

    if profile.platform == "windows" and not profile.require_elevation:
        result.warnings.append(
            "require_elevation is off on Windows; some Scoop apps need an elevated shell."
        )

    result.valid = len(result.errors) == 0
    return result

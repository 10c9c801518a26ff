"""
Configuration loader — reads setup.yml into a SetupProfile.

This is the primary entry point for loading the desired machine state.
It reads YAML, validates against Pydantic schemas, and returns a typed
profile.  When no setup.yml exists the built-in profile for the current
platform is used.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from envsetup.core.data import builtin_profile_path
from envsetup.core.models.profile import SetupProfile

logger = logging.getLogger(__name__)

# Default config filename
SETUP_CONFIG_FILE = "setup.yml"


class ConfigError(Exception):
    """Raised when the setup configuration is invalid or missing."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for setup.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to setup.yml, or None if not found.
    """
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / SETUP_CONFIG_FILE
        if candidate.is_file():
            logger.debug("Found %s", candidate)
            return candidate
    return None


def load_profile(path: Path) -> SetupProfile:
    """Load and validate a setup profile from a YAML file.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading setup profile from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "setup" key or be flat
    profile_data = data.get("setup", data)

    try:
        profile = SetupProfile.model_validate(profile_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid setup configuration in {path}: {e}") from e

    logger.info(
        "Loaded profile '%s' (%s/%s) with %d package set(s)",
        profile.name or path.name,
        profile.platform,
        profile.package_manager,
        len(profile.package_sets),
    )
    return profile


def load_builtin_profile(platform: str) -> SetupProfile:
    """Load the profile bundled with envsetup for a platform.

    Raises:
        ConfigError: If there is no built-in profile for the platform.
    """
    path = builtin_profile_path(platform)
    if path is None:
        raise ConfigError(
            f"No built-in profile for platform '{platform}'. "
            "Supported: macos, windows. Pass --platform or --config."
        )
    return load_profile(path)


def resolve_profile(
    config_path: Path | None = None,
    platform: str | None = None,
) -> tuple[SetupProfile, Path | None]:
    """Pick the profile for a run.

    Precedence: explicit ``config_path`` > setup.yml found upward from cwd
    > built-in profile for ``platform``.  An explicit ``platform`` that
    disagrees with a loaded file is an error.

    Returns:
        (profile, path the profile was loaded from or None for built-ins)
    """
    from envsetup.core.context import detect_platform

    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        return load_builtin_profile(platform or detect_platform()), None

    profile = load_profile(config_path)
    if platform and profile.platform != platform:
        raise ConfigError(
            f"{config_path} targets '{profile.platform}', not '{platform}'"
        )
    return profile, config_path

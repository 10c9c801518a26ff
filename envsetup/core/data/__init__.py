"""
Built-in setup profiles.

``profiles/<platform>.yml`` ships with the package and is used when no
setup.yml is found.  ``builtin_profile_path()`` is the only accessor.
"""

from __future__ import annotations

from pathlib import Path

_DATA_DIR = Path(__file__).parent

BUILTIN_PLATFORMS = ("macos", "windows")


def builtin_profile_path(platform: str) -> Path | None:
    """Return the bundled profile for a platform, or None if there is none."""
    if platform not in BUILTIN_PLATFORMS:
        return None
    path = _DATA_DIR / "profiles" / f"{platform}.yml"
    return path if path.is_file() else None

"""
Privilege gate — refuse to start without required elevation.

Runs before any other stage and before anything is written to disk.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from envsetup.core.errors import FatalPrerequisiteMissing

logger = logging.getLogger(__name__)


def is_elevated() -> bool:
    """True when running as Administrator (Windows) or root (POSIX)."""
    if os.name == "nt":
        import ctypes

        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except (AttributeError, OSError):
            return False
    return os.geteuid() == 0


def require_elevation(platform: str, check: Callable[[], bool] = is_elevated) -> None:
    """Raise ``FatalPrerequisiteMissing`` unless ``check()`` reports elevation."""
    if check():
        logger.debug("Elevated privilege confirmed")
        return

    if platform == "windows":
        remedy = "Re-run from a PowerShell window opened with 'Run as Administrator'."
    else:
        remedy = "Re-run with sudo, or set 'require_elevation: false' in setup.yml."

    raise FatalPrerequisiteMissing(
        "Administrative privilege is required but this process is not elevated.",
        stage="privilege",
        remedy=remedy,
    )

"""
Package-manager bootstrapper.

Present → self-update (failure only warns).
Absent  → bootstrap (failure is fatal: nothing after this can run),
          then put the manager's bin directory on the run's search path.
"""

from __future__ import annotations

import logging

from envsetup.adapters.base import PackageManager
from envsetup.core.context import RunContext
from envsetup.core.errors import FatalPrerequisiteMissing
from envsetup.core.models.outcome import ManagerStatus

logger = logging.getLogger(__name__)

_REMEDIES = {
    "homebrew": "Install Homebrew manually from https://brew.sh and re-run.",
    "scoop": "Install Scoop manually from https://scoop.sh and re-run.",
}


def ensure_package_manager(
    manager: PackageManager,
    context: RunContext,
) -> tuple[ManagerStatus, bool]:
    """Ensure the package manager is installed and current.

    Returns:
        (status, update_ok).  ``update_ok`` is False when an existing
        manager failed to self-update.

    Raises:
        FatalPrerequisiteMissing: The bootstrap procedure failed.
    """
    if manager.is_available():
        logger.info("%s already installed, updating", manager.name)
        result = manager.update()
        if not result.ok:
            logger.warning(
                "%s update failed (exit %d): %s",
                manager.name,
                result.return_code,
                result.error_summary(),
            )
        return ManagerStatus.ALREADY_INSTALLED, result.ok

    logger.info("%s not found, bootstrapping", manager.name)
    result = manager.bootstrap()
    if not result.ok:
        raise FatalPrerequisiteMissing(
            f"{manager.name} installation failed (exit {result.return_code}).",
            stage="package-manager",
            remedy=_REMEDIES.get(manager.name, f"Install {manager.name} manually and re-run."),
        )

    for directory in manager.bin_dirs():
        if context.prepend_path(directory):
            logger.debug("Added %s to search path", directory)

    if not manager.is_available():
        logger.warning(
            "%s bootstrap succeeded but '%s' is still not on the search path",
            manager.name,
            manager.command,
        )
    return ManagerStatus.INSTALLED_FRESH, True

"""
Declarative package reconciler.

Converges a ``DesiredPackageSet`` on whatever ``Installer`` it is given:

    for each package, in order:
        installed?  → already_present
        install ok  → installed_now
        install !ok → failed(exit code), continue

Not transactional: a failure never rolls back earlier installs and never
blocks later ones.  Each outcome is reported through ``on_outcome`` the
moment it is known.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from envsetup.adapters.base import Installer, PackageManager
from envsetup.core.models.result import (
    DesiredPackageSet,
    PackageOutcome,
    ReconciliationResult,
)

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[PackageOutcome], None]


class Reconciler:
    """Per-run reconciler.

    Holds the set of package sources already ensured this run so buckets
    and taps are checked and added at most once, however many package
    sets share a manager.
    """

    def __init__(self, on_outcome: OutcomeCallback | None = None):
        self._on_outcome = on_outcome
        self._sources_ensured: dict[str, set[str]] = {}

    def ensure_sources(self, manager: PackageManager, sources: list[str]) -> list[str]:
        """Register any of ``sources`` the manager does not list yet.

        Returns:
            The sources that were added.
        """
        done = self._sources_ensured.setdefault(manager.command, set())
        pending = [s for s in dict.fromkeys(sources) if s not in done]
        if not pending:
            return []

        registered = manager.list_sources()
        added: list[str] = []
        for source in pending:
            done.add(source)
            if source in registered:
                logger.debug("Source '%s' already registered with %s", source, manager.name)
                continue
            result = manager.add_source(source)
            if result.ok:
                logger.info("Registered source '%s' with %s", source, manager.name)
                added.append(source)
            else:
                logger.warning(
                    "Could not add source '%s' to %s (exit %d): %s",
                    source,
                    manager.name,
                    result.return_code,
                    result.error_summary(),
                )
        return added

    def reconcile(self, desired: DesiredPackageSet, installer: Installer) -> ReconciliationResult:
        result = ReconciliationResult(set_name=desired.name, installer=installer.name)

        for package in desired.packages:
            if installer.is_installed(package):
                outcome = PackageOutcome.present(
                    package, set_name=desired.name, installer=installer.name,
                )
            else:
                logger.info("Installing %s via %s", package, installer.name)
                start = time.monotonic()
                cmd = installer.install(package)
                elapsed_ms = int((time.monotonic() - start) * 1000)
                if cmd.ok:
                    outcome = PackageOutcome.installed(
                        package,
                        set_name=desired.name,
                        installer=installer.name,
                        duration_ms=elapsed_ms,
                    )
                else:
                    outcome = PackageOutcome.failure(
                        package,
                        cmd.return_code,
                        cmd.error_summary(),
                        set_name=desired.name,
                        installer=installer.name,
                        duration_ms=elapsed_ms,
                    )

            result.record(outcome)
            status_marker = "✗" if outcome.failed else "✓"
            logger.info("%s %s:%s → %s", status_marker, desired.name, package, outcome.status.value)
            if self._on_outcome is not None:
                self._on_outcome(outcome)

        if result.failed:
            logger.warning(
                "%d package(s) failed in '%s': %s",
                len(result.failed),
                desired.name,
                ", ".join(result.failed),
            )
        return result.finalize()


def reconcile(
    desired: DesiredPackageSet,
    installer: Installer,
    on_outcome: OutcomeCallback | None = None,
) -> ReconciliationResult:
    """Reconcile a single package set (no source registration)."""
    return Reconciler(on_outcome=on_outcome).reconcile(desired, installer)

"""
Run listener — how the engine reports progress while it works.

The engine calls these hooks the moment something is decided; it never
buffers output until the end.  The CLI subclasses this to print with
click; the base class is a silent no-op used for ``--json`` runs and
tests.
"""

from __future__ import annotations

from envsetup.core.models.outcome import ProfileEdit, StageRecord
from envsetup.core.models.result import PackageOutcome, ReconciliationResult


class RunListener:
    """No-op listener. Override the hooks you care about."""

    def stage_started(self, name: str, title: str) -> None:
        pass

    def stage_finished(self, record: StageRecord) -> None:
        pass

    def package_classified(self, outcome: PackageOutcome) -> None:
        pass

    def set_finished(self, result: ReconciliationResult) -> None:
        pass

    def file_edited(self, edit: ProfileEdit) -> None:
        pass

    def wait_for_operator(self, prompt: str) -> None:
        """Block until the operator finishes an external installer."""


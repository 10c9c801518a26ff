"""
SetupReport — everything a run did, in order.

The CLI renders it as the final summary (or JSON with ``--json``) and the
history ledger stores a condensed form of it.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from envsetup.core.models.outcome import ProfileEdit, StageRecord
from envsetup.core.models.result import PackageOutcome, ReconciliationResult


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


def generate_run_id() -> str:
    """Generate a unique run ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"run-{now}-{short}"


class SetupReport(BaseModel):
    """Result of a full setup run."""

    run_id: str = Field(default_factory=generate_run_id)
    platform: str = ""
    package_manager: str = ""
    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = ""

    stages: list[StageRecord] = Field(default_factory=list)
    reconciliations: list[ReconciliationResult] = Field(default_factory=list)
    profile_edits: list[ProfileEdit] = Field(default_factory=list)

    aborted: bool = False
    abort_stage: str = ""
    error: str | None = None
    remedy: str = ""
    exit_code: int = 0

    def add_stage(self, name: str, status: str, message: str = "") -> StageRecord:
        record = StageRecord(name=name, status=status, message=message)
        self.stages.append(record)
        return record

    def abort(self, stage: str, error: str, remedy: str = "", exit_code: int = 1) -> None:
        self.aborted = True
        self.abort_stage = stage
        self.error = error
        self.remedy = remedy
        self.exit_code = exit_code

    def finish(self) -> SetupReport:
        self.ended_at = _now_iso()
        return self

    @property
    def failed_outcomes(self) -> list[PackageOutcome]:
        return [o for r in self.reconciliations for o in r.failed_outcomes]

    @property
    def installed_count(self) -> int:
        return sum(len(r.installed_now) for r in self.reconciliations)

    @property
    def present_count(self) -> int:
        return sum(len(r.already_present) for r in self.reconciliations)

    @property
    def status(self) -> str:
        if self.aborted:
            return "failed"
        if self.failed_outcomes:
            return "partial"
        return "ok"

    @property
    def should_record(self) -> bool:
        """Whether this run belongs in the history ledger.

        A run refused at the privilege gate must leave no trace on disk.
        """
        return not (self.aborted and self.abort_stage == "privilege")

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "platform": self.platform,
            "package_manager": self.package_manager,
            "status": self.status,
            "exit_code": self.exit_code,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
            "stages": [s.model_dump(mode="json") for s in self.stages],
            "reconciliations": [r.to_dict() for r in self.reconciliations],
            "profile_edits": [e.model_dump(mode="json") for e in self.profile_edits],
            "error": self.error,
            "remedy": self.remedy,
        }

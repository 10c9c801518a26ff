"""
Package outcome and reconciliation result models.

A reconciliation run classifies every desired package into exactly one
bucket: already present, installed now, or failed.  Outcomes are
recorded one at a time as they are determined; the result refuses to
classify the same package twice, so the buckets always partition the
desired set.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class PackageStatus(str, Enum):
    ALREADY_PRESENT = "already_present"
    INSTALLED_NOW = "installed_now"
    FAILED = "failed"


class DesiredPackageSet(BaseModel):
    """An ordered, immutable list of package identifiers to converge on.

    Duplicates collapse to their first occurrence; order is kept so log
    output is deterministic.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    packages: tuple[str, ...] = ()
    kind: str = "default"           # "default" or "cask"

    @field_validator("packages", mode="before")
    @classmethod
    def _dedupe(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: dict[str, None] = {}
        for item in value:
            name = str(item).strip()
            if name:
                seen.setdefault(name, None)
        return tuple(seen)


class PackageOutcome(BaseModel):
    """Classification of a single package."""

    name: str
    status: PackageStatus
    set_name: str = ""
    installer: str = ""
    exit_code: int | None = None
    reason: str = ""
    duration_ms: int = 0

    @property
    def failed(self) -> bool:
        return self.status is PackageStatus.FAILED

    @classmethod
    def present(cls, name: str, **kwargs: Any) -> PackageOutcome:
        return cls(name=name, status=PackageStatus.ALREADY_PRESENT, **kwargs)

    @classmethod
    def installed(cls, name: str, **kwargs: Any) -> PackageOutcome:
        return cls(name=name, status=PackageStatus.INSTALLED_NOW, exit_code=0, **kwargs)

    @classmethod
    def failure(cls, name: str, exit_code: int, reason: str = "", **kwargs: Any) -> PackageOutcome:
        return cls(
            name=name,
            status=PackageStatus.FAILED,
            exit_code=exit_code,
            reason=reason or f"exit code {exit_code}",
            **kwargs,
        )


class ReconciliationResult(BaseModel):
    """Per-package classification for one desired set."""

    set_name: str
    installer: str = ""
    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = ""
    outcomes: list[PackageOutcome] = Field(default_factory=list)

    def record(self, outcome: PackageOutcome) -> None:
        """Add an outcome; each package may be classified only once."""
        if any(o.name == outcome.name for o in self.outcomes):
            raise ValueError(f"Package '{outcome.name}' already classified in '{self.set_name}'")
        self.outcomes.append(outcome)

    def finalize(self) -> ReconciliationResult:
        self.ended_at = _now_iso()
        return self

    def _names(self, status: PackageStatus) -> list[str]:
        return [o.name for o in self.outcomes if o.status is status]

    @property
    def already_present(self) -> list[str]:
        return self._names(PackageStatus.ALREADY_PRESENT)

    @property
    def installed_now(self) -> list[str]:
        return self._names(PackageStatus.INSTALLED_NOW)

    @property
    def failed(self) -> list[str]:
        return self._names(PackageStatus.FAILED)

    @property
    def failed_outcomes(self) -> list[PackageOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def status(self) -> str:
        if not self.failed:
            return "ok"
        if len(self.failed) < self.total:
            return "partial"
        return "failed"

    def to_dict(self) -> dict:
        return {
            "set": self.set_name,
            "installer": self.installer,
            "status": self.status,
            "already_present": self.already_present,
            "installed_now": self.installed_now,
            "failed": [
                {"name": o.name, "exit_code": o.exit_code, "reason": o.reason}
                for o in self.failed_outcomes
            ],
        }

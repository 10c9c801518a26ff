"""
Run history — append-only ledger of setup runs.

Every run that gets past the privilege gate appends one NDJSON line to
``~/.envsetup/history.ndjson`` (``ENVSETUP_HOME`` overrides the
directory).  Entries are never modified or deleted.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from envsetup.core.models.report import SetupReport

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_DIR = ".envsetup"
DEFAULT_HISTORY_FILE = "history.ndjson"


def default_history_path() -> Path:
    base = os.environ.get("ENVSETUP_HOME")
    root = Path(base) if base else Path.home() / DEFAULT_HISTORY_DIR
    return root / DEFAULT_HISTORY_FILE


class HistoryEntry(BaseModel):
    """Condensed record of one run."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    run_id: str = ""
    platform: str = ""
    package_manager: str = ""
    profile: str = ""

    status: str = ""               # ok, partial, failed
    exit_code: int = 0
    installed: list[str] = Field(default_factory=list)
    already_present: int = 0
    failed: list[str] = Field(default_factory=list)

    abort_stage: str = ""
    error: str | None = None

    @classmethod
    def from_report(cls, report: SetupReport, profile: str = "") -> HistoryEntry:
        return cls(
            run_id=report.run_id,
            platform=report.platform,
            package_manager=report.package_manager,
            profile=profile,
            status=report.status,
            exit_code=report.exit_code,
            installed=[n for r in report.reconciliations for n in r.installed_now],
            already_present=report.present_count,
            failed=[o.name for o in report.failed_outcomes],
            abort_stage=report.abort_stage,
            error=report.error,
        )


class HistoryWriter:
    """Append-only history ledger.

    Each call to write() appends a single JSON line.  The file is created
    if it doesn't exist.
    """

    def __init__(self, path: Path | None = None):
        self._path = path or default_history_path()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: HistoryEntry) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) + "\n"
        try:
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("History entry written: %s", entry.run_id)
        except OSError as e:
            logger.error("Failed to write history entry: %s", e)

    def read_all(self) -> list[HistoryEntry]:
        """All entries, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        entries = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(HistoryEntry.model_validate(json.loads(line)))
                    except ValueError as e:
                        logger.warning("Skipping corrupt history entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read history: %s", e)

        return entries

    def read_recent(self, n: int = 20) -> list[HistoryEntry]:
        return self.read_all()[-n:]

"""
Stage outcome enums and records.

Each stage returns a small enum instead of a bare bool so the report
(and tests) can tell "left alone" apart from "just done".
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ManagerStatus(str, Enum):
    """Result of ensuring a package manager or toolchain is present."""

    ALREADY_INSTALLED = "already_installed"
    INSTALLED_FRESH = "installed_fresh"


class PrerequisiteStatus(str, Enum):
    ALREADY_INSTALLED = "already_installed"
    INSTALL_TRIGGERED = "install_triggered"
    FAILED = "failed"


class MirrorStatus(str, Enum):
    ALREADY_CONFIGURED = "already_configured"
    CONFIGURED = "configured"


class FileWriteOutcome(str, Enum):
    """What happened to a file the run was asked to write.

    ``CREATED`` / ``APPENDED`` mean bytes were written; ``LEFT_UNTOUCHED``
    means an existing file (or marker) was found and nothing changed.
    """

    CREATED = "created"
    APPENDED = "appended"
    LEFT_UNTOUCHED = "left_untouched"

    @property
    def changed(self) -> bool:
        return self is not FileWriteOutcome.LEFT_UNTOUCHED


class StageRecord(BaseModel):
    """Summary line for one stage of the run."""

    name: str
    status: str                     # ok, warning, failed, skipped
    message: str = ""


class ProfileEdit(BaseModel):
    """One guarded edit of a shell profile or config file."""

    path: str
    outcome: FileWriteOutcome
    marker: str = ""

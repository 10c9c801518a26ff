"""
Setup errors.

Only conditions that make the rest of the run meaningless are raised.
A single package failing to install is not an error here: it is
recorded as a ``failed`` outcome in the reconciliation result.
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for errors that stop a setup run."""


class FatalPrerequisiteMissing(SetupError):
    """A mandatory prerequisite is absent and could not be provided.

    Raised for a missing elevated privilege, a failed package-manager
    bootstrap, or a failed toolchain bootstrap.  The run stops at once
    and the process exits with ``exit_code``.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: str = "",
        remedy: str = "",
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.remedy = remedy
        self.exit_code = exit_code

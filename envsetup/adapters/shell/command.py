"""
Command runner — the single place external commands are executed.

Package managers, rustup, cargo and the prerequisite probes all go
through ``CommandRunner.run``.  It never raises for a failing command:
the outcome is a ``CommandResult`` carrying the exit code.  No timeout
is applied; installers and downloads may legitimately block for minutes.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass, field

from envsetup.core.context import RunContext

logger = logging.getLogger(__name__)

# Shell conventions for "could not run at all"
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126

_TAIL_CHARS = 2000


@dataclass
class CommandResult:
    """Outcome of one external command."""

    command: list[str]
    return_code: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.return_code == 0

    @property
    def lines(self) -> list[str]:
        return [line for line in self.stdout.splitlines() if line.strip()]

    def error_summary(self) -> str:
        """Short human-readable reason for a failure."""
        tail = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        if tail:
            return tail[-1][:300]
        return f"exit code {self.return_code}"


@dataclass
class CommandRunner:
    """Run commands inside a ``RunContext``.

    ``capture=False`` lets a command write straight to the terminal; used
    for installs so the operator sees download progress and prompts.
    """

    context: RunContext
    history: list[list[str]] = field(default_factory=list)

    def run(
        self,
        cmd: list[str],
        *,
        capture: bool = True,
    ) -> CommandResult:
        self.history.append(list(cmd))

        executable = self.context.which(cmd[0])
        if executable is None:
            logger.debug("Command not found on search path: %s", cmd[0])
            return CommandResult(
                command=list(cmd),
                return_code=EXIT_NOT_FOUND,
                stderr=f"command not found: {cmd[0]}",
            )

        logger.debug("Executing: %s", " ".join(cmd))
        start = time.monotonic()

        try:
            result = subprocess.run(
                [executable, *cmd[1:]],
                capture_output=capture,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self.context.environ(),
            )
        except OSError as e:
            logger.warning("Cannot execute %s: %s", cmd[0], e)
            return CommandResult(
                command=list(cmd),
                return_code=EXIT_NOT_EXECUTABLE,
                stderr=str(e),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "")[-_TAIL_CHARS:] if capture else ""
        stderr = (result.stderr or "")[-_TAIL_CHARS:] if capture else ""

        logger.debug("%s → exit %d (%dms)", cmd[0], result.returncode, elapsed_ms)
        return CommandResult(
            command=list(cmd),
            return_code=result.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )

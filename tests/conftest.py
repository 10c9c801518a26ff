"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from envsetup.adapters.shell.command import CommandResult, CommandRunner
from envsetup.core.context import RunContext
from envsetup.core.engine.events import RunListener


class FakeRunner(CommandRunner):
    """Command runner that answers from a script instead of spawning processes.

    Responses match on a command prefix; the longest matching prefix wins.
    Unscripted commands succeed with empty output.
    """

    def __init__(self, context: RunContext):
        super().__init__(context)
        self._responses: dict[tuple[str, ...], CommandResult] = {}

    def respond(self, *prefix: str, code: int = 0, stdout: str = "", stderr: str = "") -> None:
        self._responses[prefix] = CommandResult(
            command=list(prefix), return_code=code, stdout=stdout, stderr=stderr,
        )

    def run(self, cmd, *, capture=True):
        self.history.append(list(cmd))
        for prefix in sorted(self._responses, key=len, reverse=True):
            if tuple(cmd[: len(prefix)]) == prefix:
                scripted = self._responses[prefix]
                return CommandResult(
                    command=list(cmd),
                    return_code=scripted.return_code,
                    stdout=scripted.stdout,
                    stderr=scripted.stderr,
                )
        return CommandResult(command=list(cmd), return_code=0)

    def ran(self, *prefix: str) -> bool:
        return any(tuple(c[: len(prefix)]) == prefix for c in self.history)


class RecordingListener(RunListener):
    """Listener that keeps every event in order."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []
        self.prompts: list[str] = []

    def stage_started(self, name, title):
        self.events.append(("stage_started", name))

    def stage_finished(self, record):
        self.events.append(("stage_finished", record))

    def package_classified(self, outcome):
        self.events.append(("package", outcome))

    def set_finished(self, result):
        self.events.append(("set", result))

    def file_edited(self, edit):
        self.events.append(("file", edit))

    def wait_for_operator(self, prompt):
        self.prompts.append(prompt)

    def of(self, kind: str) -> list:
        return [payload for k, payload in self.events if k == kind]


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def empty_bin(tmp_path: Path) -> Path:
    """A search path directory with nothing on it."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def ctx(home: Path, empty_bin: Path) -> RunContext:
    """macOS run context isolated from the real machine."""
    return RunContext(
        platform="macos",
        home=home,
        machine="arm64",
        base_env={"PATH": str(empty_bin)},
    )


@pytest.fixture
def win_ctx(home: Path, empty_bin: Path, tmp_path: Path) -> RunContext:
    """Windows run context isolated from the real machine."""
    return RunContext(
        platform="windows",
        home=home,
        machine="amd64",
        base_env={"PATH": str(empty_bin), "ProgramFiles(x86)": str(tmp_path / "pf86")},
    )


@pytest.fixture
def fake_runner(ctx: RunContext) -> FakeRunner:
    return FakeRunner(ctx)

"""
Tests for the run context, command runner, and file editor.
"""

import os
import sys
from pathlib import Path

import pytest

from envsetup.adapters.shell.command import (
    EXIT_NOT_FOUND,
    CommandResult,
    CommandRunner,
)
from envsetup.adapters.shell.filesystem import FileEditor
from envsetup.core.context import RunContext
from envsetup.core.models.outcome import FileWriteOutcome

# ── RunContext ───────────────────────────────────────────────────────


class TestRunContext:
    def test_env_override_wins(self, ctx: RunContext):
        ctx.base_env["RUSTUP_DIST_SERVER"] = "https://static.rust-lang.org"
        ctx.set_env("RUSTUP_DIST_SERVER", "https://mirrors.aliyun.com/rustup")
        assert ctx.getenv("RUSTUP_DIST_SERVER") == "https://mirrors.aliyun.com/rustup"

    def test_getenv_default(self, ctx: RunContext):
        assert ctx.getenv("NOPE", "fallback") == "fallback"

    def test_prepend_path_once(self, ctx: RunContext, empty_bin: Path):
        assert ctx.prepend_path("/opt/homebrew/bin")
        assert not ctx.prepend_path("/opt/homebrew/bin")
        parts = ctx.search_path.split(os.pathsep)
        assert parts == ["/opt/homebrew/bin", str(empty_bin)]

    def test_latest_prepend_first(self, ctx: RunContext):
        ctx.prepend_path("/a")
        ctx.prepend_path("/b")
        assert ctx.search_path.split(os.pathsep)[:2] == ["/b", "/a"]

    def test_environ_merges(self, ctx: RunContext):
        ctx.set_env("X", "1")
        ctx.prepend_path("/extra")
        env = ctx.environ()
        assert env["X"] == "1"
        assert env["PATH"].startswith("/extra")
        assert "X" not in ctx.base_env

    def test_windows_path_key(self, home: Path):
        ctx = RunContext(platform="windows", home=home, base_env={"Path": "C:\\bin"})
        ctx.prepend_path("C:\\scoop\\shims")
        env = ctx.environ()
        assert "PATH" not in env
        assert env["Path"].startswith("C:\\scoop\\shims")

    def test_expand_home(self, ctx: RunContext, home: Path):
        assert ctx.expand("~") == home
        assert ctx.expand("~/.cargo/config.toml") == home / ".cargo" / "config.toml"
        assert ctx.expand("/etc/profile") == Path("/etc/profile")

    def test_which_uses_run_search_path(self, ctx: RunContext, tmp_path: Path):
        tool_dir = tmp_path / "brew-bin"
        tool_dir.mkdir()
        tool = tool_dir / "brew"
        tool.write_text("#!/bin/sh\n")
        tool.chmod(0o755)

        assert ctx.which("brew") is None
        ctx.prepend_path(tool_dir)
        assert ctx.which("brew") == str(tool)

    def test_apple_silicon(self, home: Path):
        assert RunContext(platform="macos", home=home, machine="arm64").is_apple_silicon
        assert not RunContext(platform="macos", home=home, machine="x86_64").is_apple_silicon
        assert not RunContext(platform="windows", home=home, machine="arm64").is_apple_silicon


# ── CommandResult / CommandRunner ────────────────────────────────────


class TestCommandResult:
    def test_lines_skip_blank(self):
        result = CommandResult(command=["x"], return_code=0, stdout="git\n\n neovim \n")
        assert result.lines == ["git", " neovim "]

    def test_error_summary_last_stderr_line(self):
        result = CommandResult(command=["x"], return_code=1, stderr="warn\nError: no bottle\n")
        assert result.error_summary() == "Error: no bottle"

    def test_error_summary_fallback(self):
        assert CommandResult(command=["x"], return_code=3).error_summary() == "exit code 3"


class TestCommandRunner:
    def test_missing_command(self, ctx: RunContext):
        runner = CommandRunner(ctx)
        result = runner.run(["definitely-not-installed-tool", "--version"])
        assert result.return_code == EXIT_NOT_FOUND
        assert not result.ok
        assert runner.history == [["definitely-not-installed-tool", "--version"]]

    def test_runs_with_context_env(self, home: Path):
        ctx = RunContext(platform="macos", home=home)
        ctx.set_env("ENVSETUP_PROBE", "mirror")
        runner = CommandRunner(ctx)
        result = runner.run(
            [sys.executable, "-c", "import os; print(os.environ['ENVSETUP_PROBE'])"]
        )
        assert result.ok
        assert result.stdout.strip() == "mirror"

    def test_nonzero_exit_does_not_raise(self, home: Path):
        runner = CommandRunner(RunContext(platform="macos", home=home))
        result = runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('nope\\n'); sys.exit(4)"]
        )
        assert result.return_code == 4
        assert result.error_summary() == "nope"

    def test_undecodable_output_replaced(self, home: Path):
        runner = CommandRunner(RunContext(platform="windows", home=home))
        result = runner.run(
            [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'git\\n\\xff\\xfebad\\n')"]
        )
        assert result.ok
        assert result.lines[0] == "git"
        assert "\ufffd" in result.lines[1]


# ── FileEditor ───────────────────────────────────────────────────────


class TestWriteIfAbsent:
    def test_creates_missing(self, tmp_path: Path):
        target = tmp_path / ".cargo" / "config.toml"
        outcome = FileEditor().write_if_absent(target, "[source]\n")
        assert outcome is FileWriteOutcome.CREATED
        assert target.read_text() == "[source]\n"

    def test_existing_left_byte_identical(self, tmp_path: Path):
        target = tmp_path / "config.toml"
        target.write_bytes(b"[source.crates-io]\nreplace-with = 'ustc'\n")
        before = target.read_bytes()

        outcome = FileEditor().write_if_absent(target, "something else")

        assert outcome is FileWriteOutcome.LEFT_UNTOUCHED
        assert target.read_bytes() == before

    def test_alias_counts_as_existing(self, tmp_path: Path):
        legacy = tmp_path / "config"
        legacy.write_text("legacy")
        target = tmp_path / "config.toml"

        outcome = FileEditor().write_if_absent(target, "new", aliases=[legacy])

        assert outcome is FileWriteOutcome.LEFT_UNTOUCHED
        assert not target.exists()


class TestAppendIfMissing:
    def test_creates_file(self, tmp_path: Path):
        target = tmp_path / ".zshrc"
        outcome = FileEditor().append_if_missing(target, 'eval "$(starship init zsh)"')
        assert outcome is FileWriteOutcome.APPENDED
        assert target.read_text() == 'eval "$(starship init zsh)"\n'

    def test_second_append_is_noop(self, tmp_path: Path):
        target = tmp_path / ".zshrc"
        editor = FileEditor()
        editor.append_if_missing(target, "export A=1")
        outcome = editor.append_if_missing(target, "export A=1")
        assert outcome is FileWriteOutcome.LEFT_UNTOUCHED
        assert target.read_text().count("export A=1") == 1

    def test_marker_guards(self, tmp_path: Path):
        target = tmp_path / ".zshrc"
        target.write_text("# my own\neval \"$(starship init zsh --print-full-init)\"\n")
        outcome = FileEditor().append_if_missing(
            target, 'eval "$(starship init zsh)"', marker="starship init zsh",
        )
        assert outcome is FileWriteOutcome.LEFT_UNTOUCHED

    def test_newline_added_before_append(self, tmp_path: Path):
        target = tmp_path / ".bash_profile"
        target.write_text("alias ll='ls -l'")
        FileEditor().append_if_missing(target, "export B=2")
        assert target.read_text() == "alias ll='ls -l'\nexport B=2\n"


@pytest.mark.parametrize("content", ["", "existing\n"])
def test_append_preserves_existing_content(tmp_path: Path, content: str):
    target = tmp_path / "profile"
    if content:
        target.write_text(content)
    FileEditor().append_if_missing(target, "line")
    assert target.read_text().startswith(content)

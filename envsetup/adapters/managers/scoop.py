"""
Scoop adapter — apps and buckets on Windows.

Scoop's list commands print a table::

    Name   Version Source Updated             Info
    ----   ------- ------ -------             ----
    git    2.44.0  main   2024-03-01 10:00:00

Only the first column is read.
"""

from __future__ import annotations

import logging
from pathlib import Path

from envsetup.adapters.base import PackageManager
from envsetup.adapters.shell.command import CommandResult, CommandRunner

logger = logging.getLogger(__name__)

# Admin-aware bootstrap from https://get.scoop.sh
SCOOP_BOOTSTRAP = 'iex "& {$(irm get.scoop.sh)} -RunAsAdmin"'


def parse_table_names(output: str) -> set[str]:
    """First column of every row below the dashed header separator."""
    names: set[str] = set()
    in_body = False
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if not in_body:
            if set(stripped.replace(" ", "")) == {"-"}:
                in_body = True
            continue
        names.add(stripped.split()[0])
    return names


class ScoopManager(PackageManager):
    """Scoop client."""

    command = "scoop"

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @property
    def name(self) -> str:
        return "scoop"

    @property
    def root(self) -> Path:
        ctx = self._runner.context
        configured = ctx.getenv("SCOOP")
        return Path(configured) if configured else ctx.home / "scoop"

    def is_available(self) -> bool:
        return self._runner.context.which(self.command) is not None

    def installed(self) -> set[str]:
        result = self._runner.run([self.command, "list"])
        if not result.ok:
            logger.warning("scoop list failed: %s", result.error_summary())
            return set()
        return parse_table_names(result.stdout)

    def is_installed(self, package: str) -> bool:
        # `scoop prefix` exits non-zero for apps that are not installed
        return self._runner.run([self.command, "prefix", package]).ok

    def install(self, package: str) -> CommandResult:
        return self._runner.run([self.command, "install", package], capture=False)

    def update(self) -> CommandResult:
        return self._runner.run([self.command, "update"], capture=False)

    def bootstrap(self) -> CommandResult:
        return self._runner.run(
            ["powershell", "-NoProfile", "-ExecutionPolicy", "Bypass", "-Command", SCOOP_BOOTSTRAP],
            capture=False,
        )

    def list_sources(self) -> set[str]:
        result = self._runner.run([self.command, "bucket", "list"])
        if not result.ok:
            logger.warning("scoop bucket list failed: %s", result.error_summary())
            return set()
        return parse_table_names(result.stdout)

    def add_source(self, source: str) -> CommandResult:
        return self._runner.run([self.command, "bucket", "add", source], capture=False)

    def bin_dirs(self) -> list[str]:
        return [str(self.root / "shims")]

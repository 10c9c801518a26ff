"""
Run context — the explicit environment of a single setup run.

Every stage receives the same ``RunContext`` instead of reading and
mutating ``os.environ`` directly.  It carries:

    - the target platform (``macos`` / ``windows``)
    - the home directory used to expand ``~`` in configured paths
    - environment overrides (mirror endpoints, etc.)
    - directories prepended to the search path during the run

Commands spawned through ``CommandRunner`` see ``context.environ()``,
so a freshly bootstrapped package manager is resolvable by later
stages without restarting the shell.
"""

from __future__ import annotations

import os
import platform as _platform
import shutil
from dataclasses import dataclass, field
from pathlib import Path

SUPPORTED_PLATFORMS = ("macos", "windows")


def detect_platform() -> str:
    """Map ``platform.system()`` onto the platform names used in profiles."""
    system = _platform.system()
    if system == "Darwin":
        return "macos"
    if system == "Windows":
        return "windows"
    return system.lower()


def _path_key(env: dict[str, str]) -> str:
    # Windows spells it "Path"; dict copies of os.environ lose case-insensitivity
    for key in env:
        if key.upper() == "PATH":
            return key
    return "PATH"


@dataclass
class RunContext:
    """Process environment for one run, passed explicitly to every stage."""

    platform: str = field(default_factory=detect_platform)
    home: Path = field(default_factory=Path.home)
    machine: str = field(default_factory=lambda: _platform.machine().lower())
    base_env: dict[str, str] = field(default_factory=lambda: dict(os.environ))
    env_overrides: dict[str, str] = field(default_factory=dict)
    path_prepends: list[str] = field(default_factory=list)

    @property
    def is_windows(self) -> bool:
        return self.platform == "windows"

    @property
    def is_apple_silicon(self) -> bool:
        return self.platform == "macos" and self.machine in ("arm64", "aarch64")

    def set_env(self, key: str, value: str) -> None:
        """Override an environment variable for all subsequent commands."""
        self.env_overrides[key] = value

    def getenv(self, key: str, default: str = "") -> str:
        if key in self.env_overrides:
            return self.env_overrides[key]
        return self.base_env.get(key, default)

    def prepend_path(self, directory: str | Path) -> bool:
        """Put a directory in front of the search path.

        Returns False when the directory was already prepended.
        """
        entry = str(directory)
        if entry in self.path_prepends:
            return False
        self.path_prepends.insert(0, entry)
        return True

    @property
    def search_path(self) -> str:
        base = self.base_env.get(_path_key(self.base_env), "")
        parts = list(self.path_prepends)
        if base:
            parts.append(base)
        return os.pathsep.join(parts)

    def environ(self) -> dict[str, str]:
        """Full environment for a child process."""
        env = dict(self.base_env)
        env.update(self.env_overrides)
        env[_path_key(self.base_env)] = self.search_path
        return env

    def which(self, command: str) -> str | None:
        """Resolve a command against the run's search path."""
        return shutil.which(command, path=self.search_path)

    def expand(self, raw: str) -> Path:
        """Expand a configured path: ``~`` maps to the context home directory."""
        if raw == "~":
            return self.home
        if raw.startswith(("~/", "~\\")):
            return self.home / raw[2:]
        return Path(raw)

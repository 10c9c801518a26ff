"""
Logging configuration for the envsetup CLI.

Called once by ``main.cli``.  Modules log through
``logging.getLogger(__name__)``; click output is for the operator,
logging is for diagnostics (commands run, exit codes, skipped steps).

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  ENVSETUP_LOG_LEVEL  >  WARNING

A second, independent file handler is added when ENVSETUP_LOG_FILE is
set; its level comes from ENVSETUP_LOG_FILE_LEVEL (default: console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "ENVSETUP_LOG_LEVEL"
ENV_FILE = "ENVSETUP_LOG_FILE"
ENV_FILE_LEVEL = "ENVSETUP_LOG_FILE_LEVEL"

_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_PLAIN_FORMAT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(*, verbose: bool = False, quiet: bool = False, debug: bool = False) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def _console_formatter(level: int) -> logging.Formatter:
    for threshold in (logging.DEBUG, logging.INFO):
        if level <= threshold:
            fmt, datefmt = _CONSOLE_FORMATS[threshold]
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(*_PLAIN_FORMAT)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the console handler (stderr) and the optional file handler.

    Replaces any handlers already on the root logger, so calling it twice
    (e.g. from tests invoking the CLI repeatedly) does not duplicate output.
    """
    console_level = _parse_level(level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT[0], datefmt=_FILE_FORMAT[1]))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def setup_logging_from_env(level: str) -> None:
    """``setup_logging`` with the file settings taken from the environment."""
    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names fall back to WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING

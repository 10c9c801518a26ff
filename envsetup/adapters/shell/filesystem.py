"""
File editor — guarded writes to profile and config files.

Two operations only, both idempotent:

    - ``write_if_absent``: create a file from a template iff it (and any
      alias path) does not exist.  Existing files are never rewritten,
      even when their content differs.
    - ``append_if_missing``: append text iff a marker substring is not
      already in the file.

No structured parsing of existing content.
"""

from __future__ import annotations

import logging
from pathlib import Path

from envsetup.core.models.outcome import FileWriteOutcome

logger = logging.getLogger(__name__)


class FileEditor:
    """Marker- and presence-guarded file writer."""

    def write_if_absent(
        self,
        target: Path,
        content: str,
        aliases: list[Path] | tuple[Path, ...] = (),
    ) -> FileWriteOutcome:
        """Create ``target`` with ``content`` unless it or an alias exists."""
        for candidate in (target, *aliases):
            if candidate.exists():
                logger.info("Config file already present, left untouched: %s", candidate)
                return FileWriteOutcome.LEFT_UNTOUCHED

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info("Created %s (%d bytes)", target, len(content))
        return FileWriteOutcome.CREATED

    def append_if_missing(
        self,
        target: Path,
        text: str,
        marker: str | None = None,
    ) -> FileWriteOutcome:
        """Append ``text`` unless ``marker`` (default: ``text``) is already present."""
        marker = marker or text
        existing = ""
        if target.is_file():
            existing = target.read_text(encoding="utf-8", errors="replace")
            if marker in existing:
                logger.debug("Marker already in %s: %s", target, marker)
                return FileWriteOutcome.LEFT_UNTOUCHED

        target.parent.mkdir(parents=True, exist_ok=True)
        prefix = "\n" if existing and not existing.endswith("\n") else ""
        with target.open("a", encoding="utf-8") as f:
            f.write(prefix + text.rstrip("\n") + "\n")

        logger.info("Appended to %s: %s", target, marker)
        return FileWriteOutcome.APPENDED

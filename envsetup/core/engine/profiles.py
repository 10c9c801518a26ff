"""
Shell profile configurator.

Appends configured lines to shell profiles.  Blocks with a marker are
appended once as a unit (``starship init zsh``); lines without one guard
themselves (``export RUSTUP_DIST_SERVER=...``).  Existing content is
never rewritten.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from envsetup.adapters.shell.filesystem import FileEditor
from envsetup.core.context import RunContext
from envsetup.core.models.outcome import ProfileEdit
from envsetup.core.models.profile import ProfileEditSpec

logger = logging.getLogger(__name__)

EditCallback = Callable[[ProfileEdit], None]


def _edits_for(spec: ProfileEditSpec) -> list[tuple[str, str]]:
    """(text, marker) pairs to append for one spec."""
    if spec.marker:
        block = [f"# {spec.comment}"] if spec.comment else []
        block.extend(spec.lines)
        text = "\n".join(block)
        # Blank line before a commented block keeps profiles readable
        return [("\n" + text if spec.comment else text, spec.marker)]
    return [(line, line) for line in spec.lines]


def apply_profile_edits(
    specs: list[ProfileEditSpec],
    context: RunContext,
    editor: FileEditor,
    on_edit: EditCallback | None = None,
) -> list[ProfileEdit]:
    edits: list[ProfileEdit] = []
    for spec in specs:
        target = context.expand(spec.path)
        for text, marker in _edits_for(spec):
            outcome = editor.append_if_missing(target, text, marker=marker)
            edit = ProfileEdit(path=str(target), outcome=outcome, marker=marker)
            edits.append(edit)
            if on_edit is not None:
                on_edit(edit)

    changed = sum(1 for e in edits if e.outcome.changed)
    logger.info("Profile edits: %d applied, %d already present", changed, len(edits) - changed)
    return edits

"""
Toolchain configurator — mirror endpoints, toolchain install, sub-tools.

Order matters:
    1. ``configure_mirror``   env overrides first (the bootstrap reads them
                              while downloading), then the persistent
                              mirror file, created only if absent.
    2. ``ensure_toolchain``   update or bootstrap, then put the toolchain's
                              bin directory on the search path.
    3. the caller reconciles the tool list through ``toolchain.installer()``.
"""

from __future__ import annotations

import logging

from envsetup.adapters.base import Toolchain
from envsetup.adapters.shell.filesystem import FileEditor
from envsetup.core.context import RunContext
from envsetup.core.errors import FatalPrerequisiteMissing
from envsetup.core.models.outcome import FileWriteOutcome, ManagerStatus, MirrorStatus
from envsetup.core.models.profile import MirrorSpec

logger = logging.getLogger(__name__)


def apply_mirror_env(mirror: MirrorSpec, context: RunContext) -> None:
    """Put the mirror endpoint variables on the run context."""
    for key, value in mirror.env.items():
        context.set_env(key, value)
        logger.debug("Mirror override %s=%s", key, value)


def write_mirror_config(
    mirror: MirrorSpec,
    context: RunContext,
    editor: FileEditor,
) -> FileWriteOutcome:
    """Create the persistent mirror file unless any config path exists.

    An existing file is authoritative even if it points somewhere else.
    """
    if not mirror.config_file or not mirror.config_template:
        return FileWriteOutcome.LEFT_UNTOUCHED

    target = context.expand(mirror.config_file)
    aliases = [context.expand(alias) for alias in mirror.config_aliases]
    return editor.write_if_absent(target, mirror.config_template, aliases=aliases)


def configure_mirror(
    mirror: MirrorSpec,
    context: RunContext,
    editor: FileEditor,
) -> MirrorStatus:
    apply_mirror_env(mirror, context)
    outcome = write_mirror_config(mirror, context, editor)
    if outcome is FileWriteOutcome.CREATED:
        return MirrorStatus.CONFIGURED
    return MirrorStatus.ALREADY_CONFIGURED


def ensure_toolchain(
    toolchain: Toolchain,
    context: RunContext,
    *,
    non_interactive: bool = True,
) -> tuple[ManagerStatus, bool]:
    """Install or update the toolchain.

    Returns:
        (status, update_ok)

    Raises:
        FatalPrerequisiteMissing: The toolchain bootstrap failed; its tools
            cannot be installed.
    """
    if toolchain.is_available():
        logger.info("%s toolchain already installed, updating", toolchain.name)
        result = toolchain.update()
        if not result.ok:
            logger.warning(
                "%s update failed (exit %d): %s",
                toolchain.name,
                result.return_code,
                result.error_summary(),
            )
        status, update_ok = ManagerStatus.ALREADY_INSTALLED, result.ok
    else:
        logger.info("Bootstrapping %s toolchain", toolchain.name)
        result = toolchain.bootstrap(non_interactive=non_interactive)
        if not result.ok:
            raise FatalPrerequisiteMissing(
                f"{toolchain.name} toolchain installation failed (exit {result.return_code}).",
                stage="toolchain",
                remedy="Install rustup manually from https://rustup.rs and re-run.",
            )
        status, update_ok = ManagerStatus.INSTALLED_FRESH, True

    for directory in toolchain.bin_dirs():
        context.prepend_path(directory)
    return status, update_ok

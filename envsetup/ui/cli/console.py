"""
Console listener — prints run progress as it happens.
"""

from __future__ import annotations

import click

from envsetup.core.engine.events import RunListener
from envsetup.core.models.outcome import ProfileEdit, StageRecord
from envsetup.core.models.result import PackageOutcome, PackageStatus, ReconciliationResult

_STAGE_COLORS = {"ok": "green", "warning": "yellow", "failed": "red", "skipped": "white"}
_STAGE_ICONS = {"ok": "✅", "warning": "⚠️ ", "failed": "❌", "skipped": "⊘"}


class ConsoleListener(RunListener):
    """Print each classification the moment the engine reports it."""

    def __init__(self, *, assume_yes: bool = False, verbose: bool = False):
        self.assume_yes = assume_yes
        self.verbose = verbose

    def stage_started(self, name: str, title: str) -> None:
        click.secho(f"\n--- {title} ---", fg="cyan")

    def stage_finished(self, record: StageRecord) -> None:
        if record.status == "skipped" and not self.verbose:
            return
        icon = _STAGE_ICONS.get(record.status, "•")
        color = _STAGE_COLORS.get(record.status, "white")
        message = f" — {record.message}" if record.message else ""
        click.secho(f"   {icon} {record.name}{message}", fg=color)

    def package_classified(self, outcome: PackageOutcome) -> None:
        if outcome.status is PackageStatus.ALREADY_PRESENT:
            click.secho(f"   ✓ {outcome.name}", fg="green", nl=False)
            click.echo(" (already installed)")
        elif outcome.status is PackageStatus.INSTALLED_NOW:
            click.secho(f"   ✓ {outcome.name}", fg="green", nl=False)
            click.echo(" (installed)")
        else:
            click.secho(f"   ✗ {outcome.name}", fg="red", nl=False)
            click.echo(f" (exit {outcome.exit_code}: {outcome.reason})")

    def set_finished(self, result: ReconciliationResult) -> None:
        color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(result.status, "white")
        click.secho(
            f"   {result.set_name}: {len(result.installed_now)} installed, "
            f"{len(result.already_present)} present, {len(result.failed)} failed",
            fg=color,
        )

    def file_edited(self, edit: ProfileEdit) -> None:
        if edit.outcome.changed:
            click.secho(f"   ✓ {edit.path}", fg="green", nl=False)
            click.echo(f" ({edit.outcome.value}: {edit.marker})")
        elif self.verbose:
            click.echo(f"   ⊘ {edit.path} (already contains: {edit.marker})")

    def wait_for_operator(self, prompt: str) -> None:
        if self.assume_yes:
            click.secho(f"   ⏳ {prompt} — not waiting (--yes)", fg="yellow")
            return
        click.prompt(f"   ⏳ {prompt}", default="", show_default=False, prompt_suffix=" ")


class QuietListener(RunListener):
    """Listener for ``--json`` runs: silent, but still waits for the operator."""

    def __init__(self, *, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def wait_for_operator(self, prompt: str) -> None:
        if not self.assume_yes:
            click.prompt(prompt, default="", show_default=False, prompt_suffix=" ", err=True)

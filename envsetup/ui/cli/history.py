"""
CLI command for the run history ledger.
"""

from __future__ import annotations

import json

import click


@click.command()
@click.option("--limit", "-n", default=10, type=int, help="Number of runs to show.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def history(limit: int, as_json: bool) -> None:
    """Show recent setup runs."""
    from envsetup.core.persistence.history import HistoryWriter

    writer = HistoryWriter()
    entries = writer.read_recent(limit)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.secho("No runs recorded yet.", fg="yellow")
        return

    click.secho(f"\n📜 Recent runs ({writer.path})", fg="cyan", bold=True)
    for entry in reversed(entries):
        color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(entry.status, "white")
        click.secho(f"   {entry.status:<8}", fg=color, nl=False)
        click.echo(
            f" {entry.timestamp[:19]}  {entry.platform}/{entry.package_manager}"
            f"  +{len(entry.installed)} ={entry.already_present} ✗{len(entry.failed)}"
        )
        if entry.failed:
            click.echo(f"            failed: {', '.join(entry.failed)}")
        if entry.error:
            click.echo(f"            {entry.abort_stage}: {entry.error}")
    click.echo()

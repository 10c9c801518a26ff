"""
envsetup — CLI entrypoint.

Usage:
    python -m envsetup.main --help
    envsetup run
    envsetup plan
    envsetup config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from envsetup import __version__
from envsetup.core.context import SUPPORTED_PLATFORMS
from envsetup.core.observability.logging_config import resolve_level, setup_logging_from_env

# Exit code for unusable configuration (click's own usage-error code)
EXIT_CONFIG_ERROR = 2


@click.group()
@click.version_option(version=__version__, prog_name="envsetup")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to setup.yml (default: auto-detect, then built-in profile).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """envsetup — bootstrap a developer machine from a declarative profile."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging_from_env(resolve_level(verbose=verbose, quiet=quiet, debug=debug))


def _load_profile_or_exit(ctx: click.Context, platform: str | None):
    from envsetup.core.config.loader import ConfigError, resolve_profile

    try:
        return resolve_profile(ctx.obj.get("config_path"), platform)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(EXIT_CONFIG_ERROR)


@cli.command()
@click.option(
    "--platform",
    type=click.Choice(SUPPORTED_PLATFORMS),
    default=None,
    help="Target platform (default: detect).",
)
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Don't wait at manual installer steps.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--skip-profiles", is_flag=True, help="Don't edit shell profiles.")
@click.option("--no-history", is_flag=True, help="Don't record this run in the history ledger.")
@click.pass_context
def run(
    ctx: click.Context,
    platform: str | None,
    assume_yes: bool,
    as_json: bool,
    skip_profiles: bool,
    no_history: bool,
) -> None:
    """Install everything the profile describes.

    Examples:

        envsetup run

        envsetup --config ./setup.yml run --yes

        envsetup run --skip-profiles --json
    """
    from envsetup.core.context import RunContext
    from envsetup.core.engine.executor import SetupExecutor
    from envsetup.core.persistence.history import HistoryEntry, HistoryWriter
    from envsetup.ui.cli.console import ConsoleListener, QuietListener

    profile, loaded_from = _load_profile_or_exit(ctx, platform)
    context = RunContext(platform=profile.platform)

    if as_json:
        listener = QuietListener(assume_yes=assume_yes)
    else:
        listener = ConsoleListener(assume_yes=assume_yes, verbose=ctx.obj.get("verbose", False))
        source = str(loaded_from) if loaded_from else f"built-in {profile.platform} profile"
        click.secho(
            f"\n🚀 Setting up {profile.platform} with {profile.package_manager}",
            fg="magenta",
            bold=True,
        )
        click.echo(f"   Profile: {source}")

    report = SetupExecutor(
        profile,
        context,
        listener=listener,
        skip_profiles=skip_profiles,
    ).run()

    if not no_history and report.should_record:
        HistoryWriter().write(HistoryEntry.from_report(report, profile=profile.name))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    click.echo()
    if report.aborted:
        click.secho(f"❌ {report.error}", fg="red", bold=True)
        if report.remedy:
            click.echo(f"   {report.remedy}")
        click.echo()
        sys.exit(report.exit_code)

    failed = report.failed_outcomes
    if failed:
        click.secho(f"⚠️  {len(failed)} package(s) failed to install:", fg="yellow", bold=True)
        for outcome in failed:
            click.echo(
                f"   • {outcome.name} [{outcome.set_name} via {outcome.installer}]"
                f" — exit {outcome.exit_code}: {outcome.reason}"
            )
        click.echo("   Re-run 'envsetup run' or install them manually.")
    else:
        click.secho("🎉 All setup tasks completed!", fg="green", bold=True)

    click.echo(
        f"   Installed: {report.installed_count} | "
        f"Already present: {report.present_count} | "
        f"Failed: {len(failed)}"
    )
    if any(e.outcome.changed for e in report.profile_edits):
        click.secho(
            "   Open a new terminal (or re-source your profile) to apply shell changes.",
            fg="cyan",
        )
    click.echo()
    sys.exit(report.exit_code)


@cli.command()
@click.option(
    "--platform",
    type=click.Choice(SUPPORTED_PLATFORMS),
    default=None,
    help="Target platform (default: detect).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, platform: str | None, as_json: bool) -> None:
    """Show which packages are missing, without installing anything."""
    from envsetup.core.use_cases.plan import build_plan

    profile, _ = _load_profile_or_exit(ctx, platform)
    result = build_plan(profile)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho(f"\n📋 Plan: {profile.platform} / {profile.package_manager}", fg="cyan", bold=True)
    if not result.manager_available:
        click.secho(
            f"   {profile.package_manager} is not installed — it will be bootstrapped first",
            fg="yellow",
        )

    for set_plan in result.sets:
        click.echo()
        click.secho(
            f"   {set_plan.name} ({set_plan.installer}): "
            f"{len(set_plan.present)} present, {len(set_plan.missing)} missing",
            fg="white",
            bold=True,
        )
        for name in set_plan.missing:
            click.secho(f"     + {name}", fg="yellow")
        if ctx.obj.get("verbose"):
            for name in set_plan.present:
                click.secho(f"     ✓ {name}", fg="green")

    click.echo()


# ── Register sub-command groups from envsetup/ui/cli/ ─────────────

from envsetup.ui.cli.config import config  # noqa: E402
from envsetup.ui.cli.history import history  # noqa: E402

cli.add_command(config)
cli.add_command(history)


if __name__ == "__main__":
    cli()

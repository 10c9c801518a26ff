"""
CLI commands for setup configuration.

Thin wrappers over ``envsetup.core.use_cases.config_check`` and the loader.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
import yaml

from envsetup.core.context import SUPPORTED_PLATFORMS

_platform_option = click.option(
    "--platform",
    type=click.Choice(SUPPORTED_PLATFORMS),
    default=None,
    help="Target platform (default: detect).",
)


@click.group()
def config() -> None:
    """Setup configuration — check, show, init."""


@config.command("check")
@_platform_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, platform: str | None, as_json: bool) -> None:
    """Validate setup.yml (or the built-in profile)."""
    from envsetup.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"), platform=platform)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.profile is not None
        profile = result.profile
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        source = "built-in" if result.builtin else str(result.config_path)
        click.echo(f"   Profile: {profile.name or '(unnamed)'} ({source})")
        click.echo(f"   Platform: {profile.platform} / {profile.package_manager}")
        for package_set in profile.package_sets:
            click.echo(f"   Set '{package_set.name}': {len(package_set.packages)} package(s)")
        if profile.toolchain and profile.toolchain.enabled:
            click.echo(f"   Toolchain: {profile.toolchain.name} ({len(profile.toolchain.tools)} tool(s))")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


@config.command("show")
@_platform_option
@click.pass_context
def config_show(ctx: click.Context, platform: str | None) -> None:
    """Print the effective profile as YAML."""
    from envsetup.core.config.loader import ConfigError, resolve_profile

    try:
        profile, _ = resolve_profile(ctx.obj.get("config_path"), platform)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(2)

    click.echo(yaml.safe_dump(profile.model_dump(mode="json"), sort_keys=False), nl=False)


@config.command("init")
@_platform_option
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default="setup.yml",
    help="Where to write the profile.",
)
def config_init(platform: str | None, output: str) -> None:
    """Write the built-in profile to setup.yml (never overwrites)."""
    from envsetup.adapters.shell.filesystem import FileEditor
    from envsetup.core.context import detect_platform
    from envsetup.core.data import builtin_profile_path
    from envsetup.core.models.outcome import FileWriteOutcome

    platform = platform or detect_platform()
    source = builtin_profile_path(platform)
    if source is None:
        click.secho(f"❌ No built-in profile for '{platform}'. Use --platform.", fg="red")
        sys.exit(2)

    target = Path(output)
    outcome = FileEditor().write_if_absent(target, source.read_text(encoding="utf-8"))
    if outcome is FileWriteOutcome.CREATED:
        click.secho(f"✅ Wrote {platform} profile to {target}", fg="green")
    else:
        click.secho(f"⊘ {target} already exists — left untouched", fg="yellow")

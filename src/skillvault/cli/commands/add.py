"""Add asset content to the vault."""

from pathlib import Path

import click

from skillvault.cli.common import exit_with_error, scopes_from_options
from skillvault.core.assets import ASSET_TYPES
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.output import user_output
from skillvault.core.payload import InvalidPayloadError, read_payload_source
from skillvault.operations.add import add_asset, detect_asset_identity


@click.command("add")
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.option("--name", help="Asset name (defaults to metadata or the source name).")
@click.option("--type", "asset_type", type=click.Choice(ASSET_TYPES), help="Asset type.")
@click.option("--version", "version", help="Version to store instead of the suggestion.")
@click.option("--yes", "-y", is_flag=True, help="Accept the suggested version.")
@click.option("--global", "make_global", is_flag=True, help="Install for every repository.")
@click.option("--repo", help="Repository URL to scope the asset to.")
@click.option("--path", "paths", multiple=True, help="Path within --repo (repeatable).")
@click.pass_obj
def add_cmd(
    ctx: SkillvaultContext,
    source: Path,
    name: str | None,
    asset_type: str | None,
    version: str | None,
    yes: bool,
    make_global: bool,
    repo: str | None,
    paths: tuple[str, ...],
) -> None:
    """Add SOURCE (a directory or zip) to the vault and pin it in the lock file.

    Re-adding unchanged content creates no new version; only the scopes are
    updated.
    """

    def confirm_version(suggested: str) -> str:
        if version is not None:
            return version
        if yes:
            return suggested
        return click.prompt("Version", default=suggested, err=True)

    try:
        vault = ctx.require_vault()
        scopes = scopes_from_options(make_global, repo, paths)
        payload = read_payload_source(source)
        fallback_name = source.stem if source.is_file() else source.name
        resolved_name, resolved_type = detect_asset_identity(
            payload, name=name, asset_type=asset_type, fallback_name=fallback_name
        )
        result = add_asset(
            vault,
            payload,
            name=resolved_name,
            asset_type=resolved_type,
            scopes=scopes,
            confirm_version=confirm_version,
            default_version=ctx.config.default_version,
        )
    except (SkillvaultError, InvalidPayloadError) as e:
        exit_with_error(str(e))

    if result.identical:
        user_output(
            f"{result.entry.name} is unchanged from version {result.entry.version}; "
            "no new version created"
        )
    else:
        user_output(click.style("✓ ", fg="green") + f"Added {result.entry.key}")
    if result.entry.scopes:
        for scope in result.entry.scopes:
            where = ", ".join(scope.paths) if scope.paths else "whole repository"
            user_output(f"  scoped to {scope.repo} ({where})")
    else:
        user_output("  installs globally")

"""Change where an asset is installed."""

import click

from skillvault.cli.common import exit_with_error, scopes_from_options
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.output import user_output
from skillvault.operations.remove import set_asset_scopes


@click.command("scope")
@click.argument("name")
@click.option("--global", "make_global", is_flag=True, help="Install for every repository.")
@click.option("--repo", help="Repository URL to scope the asset to.")
@click.option("--path", "paths", multiple=True, help="Path within --repo (repeatable).")
@click.option("--version", "version", help="Only change this version's entry.")
@click.pass_obj
def scope_cmd(
    ctx: SkillvaultContext,
    name: str,
    make_global: bool,
    repo: str | None,
    paths: tuple[str, ...],
    version: str | None,
) -> None:
    """Replace the scopes of NAME in the lock file."""
    try:
        scopes = scopes_from_options(make_global, repo, paths)
        if scopes is None:
            exit_with_error("Specify --global or --repo")
        updated = set_asset_scopes(ctx.require_vault(), name, scopes, version=version)
    except SkillvaultError as e:
        exit_with_error(str(e))

    for entry in updated:
        target = "globally" if not entry.scopes else f"to {entry.scopes[0].repo}"
        user_output(click.style("✓ ", fg="green") + f"{entry.key} now installs {target}")

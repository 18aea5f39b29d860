"""Remove an asset from the lock file."""

import click

from skillvault.cli.common import exit_with_error
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.output import user_output
from skillvault.operations.remove import remove_asset


@click.command("remove")
@click.argument("name")
@click.option("--version", "version", help="Only remove this version.")
@click.option("--delete-payload", is_flag=True, help="Also delete stored payloads from the vault.")
@click.pass_obj
def remove_cmd(
    ctx: SkillvaultContext, name: str, version: str | None, delete_payload: bool
) -> None:
    """Stop distributing NAME. Machines uninstall it on their next install."""
    try:
        removed = remove_asset(
            ctx.require_vault(), name, version=version, delete_payload=delete_payload
        )
    except SkillvaultError as e:
        exit_with_error(str(e))

    for entry in removed:
        user_output(click.style("✓ ", fg="green") + f"Removed {entry.key} from the lock file")

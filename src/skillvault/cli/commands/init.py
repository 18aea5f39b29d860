"""Configure the vault this machine installs from."""

from pathlib import Path

import click

from skillvault.cli.common import exit_with_error
from skillvault.core.config import save_config
from skillvault.core.context import SkillvaultContext
from skillvault.core.output import user_output


@click.command("init")
@click.option(
    "--vault",
    "vault_path",
    type=click.Path(path_type=Path),
    required=True,
    help="Directory holding the vault.",
)
@click.option("--create", is_flag=True, help="Create the vault directory if it does not exist.")
@click.pass_obj
def init_cmd(ctx: SkillvaultContext, vault_path: Path, create: bool) -> None:
    """Point skillvault at a directory-backed vault."""
    resolved = vault_path.expanduser().resolve()
    if not resolved.exists():
        if not create:
            exit_with_error(f"Vault directory {resolved} does not exist (use --create)")
        resolved.mkdir(parents=True)
    elif not resolved.is_dir():
        exit_with_error(f"Vault path {resolved} is not a directory")

    save_config(ctx.config_dir, ctx.config.with_path_vault(resolved))
    user_output(click.style("✓ ", fg="green") + f"Vault set to {resolved}")

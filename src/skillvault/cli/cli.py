import logging

import click

from skillvault.cli.commands.add import add_cmd
from skillvault.cli.commands.init import init_cmd
from skillvault.cli.commands.install import install_cmd
from skillvault.cli.commands.remove import remove_cmd
from skillvault.cli.commands.scope import scope_cmd
from skillvault.cli.commands.status import status_cmd
from skillvault.cli.commands.uninstall import uninstall_cmd
from skillvault.cli.common import CONTEXT_SETTINGS, exit_with_error
from skillvault.core.context import create_context
from skillvault.core.errors import ConfigurationError


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="skillvault")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Install AI assistant skills, agents, rules and MCP servers from a shared vault."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ConfigurationError as e:
            exit_with_error(str(e))


cli.add_command(init_cmd)
cli.add_command(add_cmd)
cli.add_command(remove_cmd)
cli.add_command(scope_cmd)
cli.add_command(install_cmd)
cli.add_command(uninstall_cmd)
cli.add_command(status_cmd)


def main() -> None:
    """CLI entry point used by the `skillvault` console script."""
    cli()

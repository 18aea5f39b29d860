"""Uninstall tracked assets."""

from pathlib import Path

import click

from skillvault.cli.common import exit_with_error, print_plan, print_report
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.output import user_output
from skillvault.operations.install import apply_plan
from skillvault.operations.uninstall import prepare_uninstall


@click.command("uninstall")
@click.argument("names", nargs=-1)
@click.option("--all", "remove_all", is_flag=True, help="Uninstall every tracked asset.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--dry-run", is_flag=True, help="Show the plan without changing anything.")
@click.option("--clients", "clients_csv", help="Comma-separated client ids to uninstall from.")
@click.option(
    "--target",
    type=click.Path(path_type=Path),
    help="Treat this directory as the repository root.",
)
@click.pass_obj
def uninstall_cmd(
    ctx: SkillvaultContext,
    names: tuple[str, ...],
    remove_all: bool,
    yes: bool,
    dry_run: bool,
    clients_csv: str | None,
    target: Path | None,
) -> None:
    """Remove NAMES (or everything with --all) from this machine and repository.

    The lock file is not changed, so a later install brings them back.
    """
    if not names and not remove_all:
        exit_with_error("Specify asset names or --all")
    if names and remove_all:
        exit_with_error("--all cannot be combined with asset names")

    try:
        trackers, plan = prepare_uninstall(
            ctx,
            names=None if remove_all else list(names),
            target=target,
            clients_csv=clients_csv,
        )
    except SkillvaultError as e:
        exit_with_error(str(e))

    if plan.is_empty:
        user_output("Nothing to uninstall.")
        return

    print_plan(plan)
    if dry_run:
        user_output(click.style("Dry run: no changes made.", dim=True))
        return

    count = len(plan.uninstalls) + len(plan.orphans)
    if not yes and not click.confirm(f"Uninstall {count} item(s)?", default=False, err=True):
        user_output("Aborted.")
        return

    try:
        result = apply_plan(ctx, trackers, plan)
    except SkillvaultError as e:
        exit_with_error(str(e))

    print_report(result.report)
    if result.report.has_failures:
        raise SystemExit(1)

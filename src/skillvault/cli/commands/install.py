"""Install assets from the vault's lock file."""

from pathlib import Path

import click

from skillvault.cli.common import (
    exit_with_error,
    print_install_summary,
    print_plan,
    print_report,
)
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.output import user_output
from skillvault.operations.install import apply_plan, plan_install, prepare_install


@click.command("install")
@click.option(
    "--target",
    type=click.Path(path_type=Path),
    help="Treat this directory as the repository root.",
)
@click.option("--clients", "clients_csv", help="Comma-separated client ids to install for.")
@click.option("--dry-run", is_flag=True, help="Show the plan without changing anything.")
@click.option("--repair", is_flag=True, help="Reinstall tracked assets missing on disk.")
@click.pass_obj
def install_cmd(
    ctx: SkillvaultContext,
    target: Path | None,
    clients_csv: str | None,
    dry_run: bool,
    repair: bool,
) -> None:
    """Bring installed assets in line with the lock file.

    Installs what is missing and removes what the lock file no longer asks for.
    """
    try:
        session = prepare_install(ctx, target=target, clients_csv=clients_csv)
        plan = plan_install(ctx, session, repair=repair)
    except SkillvaultError as e:
        exit_with_error(str(e))

    if not session.clients:
        user_output("No supported clients detected.")
    if plan.is_empty:
        user_output("Everything is up to date.")
        return

    print_plan(plan)
    if dry_run:
        print_install_summary(plan)
        user_output(click.style("Dry run: no changes made.", dim=True))
        return

    try:
        result = apply_plan(ctx, session.trackers, plan)
    except SkillvaultError as e:
        exit_with_error(str(e))

    print_report(result.report)
    if result.report.has_failures:
        raise SystemExit(1)

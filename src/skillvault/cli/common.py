"""Shared helpers for CLI commands."""

from typing import NoReturn

import click

from skillvault.core.errors import InvalidScopeError
from skillvault.core.output import user_output
from skillvault.core.scope import Scope
from skillvault.operations.planning import ReconcilePlan
from skillvault.operations.reconcile import ReconcileReport

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

_STATUS_SYMBOLS = {
    "success": click.style("✓", fg="green"),
    "failed": click.style("✗", fg="red"),
    "skipped": click.style("-", dim=True),
}


def exit_with_error(message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(1)


def scopes_from_options(
    make_global: bool, repo: str | None, paths: tuple[str, ...]
) -> tuple[Scope, ...] | None:
    """Translate --global/--repo/--path into scopes.

    Returns None when no scope option was given.

    Raises:
        InvalidScopeError: On contradictory or incomplete options
    """
    if make_global:
        if repo is not None or paths:
            raise InvalidScopeError("--global cannot be combined with --repo or --path")
        return ()
    if repo is None and not paths:
        return None
    return (Scope.create(repo, list(paths)),)


def print_plan(plan: ReconcilePlan) -> None:
    """Show pending operations, uninstalls first."""
    user_output(click.style("Plan:", bold=True))
    for item in plan.uninstalls:
        note = " (tracker only)" if item.tracker_only else ""
        user_output(
            f"  {click.style('uninstall', fg='yellow')} {item.asset.key} "
            f"from {item.client_id} [{item.target.describe()}]{note}"
        )
    for item in plan.installs:
        user_output(
            f"  {click.style('install', fg='green')}   {item.asset.key} "
            f"to {item.client_id} [{item.target.describe()}]"
        )
    for conflict in plan.conflicts:
        label = click.style("conflict", fg="red")
        user_output(f"  {label}  {conflict.client_id}: {conflict.message}")
    for item in plan.orphans:
        user_output(
            f"  {click.style('orphan', fg='red')}    {item.asset.key} "
            f"tracked for unknown client '{item.client_id}'"
        )


def print_install_summary(plan: ReconcilePlan) -> None:
    """One line per asset to install, with the clients receiving it."""
    entries = plan.install_plan_entries()
    if not entries:
        return
    user_output(click.style("Assets to install:", bold=True))
    for entry in entries:
        where = "global" if entry.is_global else "repository"
        user_output(f"  {entry.asset.key} ({where}): {', '.join(entry.clients)}")


def print_report(report: ReconcileReport) -> None:
    """Show one line per asset, client and target, then a summary."""
    for item in report.items:
        line = (
            f"  {_STATUS_SYMBOLS[item.status]} {item.action} {item.asset.key} "
            f"on {item.client_id} [{item.target.describe()}]"
        )
        if item.error:
            line += f": {click.style(item.error, fg='red')}"
        elif item.status == "skipped" and item.message:
            line += f" ({item.message})"
        user_output(line)

    succeeded = len(report.successes)
    failed = len(report.failures)
    skipped = len(report.items) - succeeded - failed
    summary = f"{succeeded} succeeded, {failed} failed"
    if skipped:
        summary += f", {skipped} skipped"
    color = "red" if failed else "green"
    user_output(click.style(summary, fg=color, bold=True))

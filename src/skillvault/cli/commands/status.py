"""Show declared and installed assets."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from skillvault.cli.common import exit_with_error
from skillvault.core.context import SkillvaultContext
from skillvault.core.errors import SkillvaultError
from skillvault.core.repo_context import detect_repo_context
from skillvault.core.scope import (
    Global,
    InstallTarget,
    NotInstalled,
    Placement,
    placement_from_targets,
)
from skillvault.lockfile.io import fetch_lock_file
from skillvault.lockfile.models import LockFile
from skillvault.operations.install import load_trackers


def describe_placement(placement: Placement) -> str:
    if isinstance(placement, NotInstalled):
        return "[dim]not installed[/dim]"
    if isinstance(placement, Global):
        return "[green]global[/green]"
    parts: list[str] = []
    for scope in placement.scopes:
        if scope.paths:
            parts.append(f"{scope.repo}: {', '.join(scope.paths)}")
        else:
            parts.append(f"{scope.repo}")
    return "[cyan]" + "; ".join(parts) + "[/cyan]"


@click.command("status")
@click.option(
    "--target",
    type=click.Path(path_type=Path),
    help="Treat this directory as the repository root.",
)
@click.pass_obj
def status_cmd(ctx: SkillvaultContext, target: Path | None) -> None:
    """List assets from the lock file and where they are installed here."""
    try:
        context = detect_repo_context(ctx.git, ctx.cwd, target)
        lock = fetch_lock_file(ctx.vault, ctx.lock_cache) if ctx.vault is not None else None
    except SkillvaultError as e:
        exit_with_error(str(e))

    trackers = load_trackers(ctx, context)
    repo_label = "-"
    if context is not None:
        repo_label = context.remote_url or str(context.root)

    installed: dict[str, list[InstallTarget]] = {}
    clients: dict[str, set[str]] = {}
    versions: dict[str, set[str]] = {}
    for base, tracker in trackers.items():
        for entry in tracker.assets:
            installed.setdefault(entry.name, []).append(InstallTarget.within(base, entry.path))
            clients.setdefault(entry.name, set()).update(entry.clients)
            versions.setdefault(entry.name, set()).add(entry.version)

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Asset", style="cyan", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Declared", no_wrap=True)
    table.add_column("Installed here", no_wrap=True)
    table.add_column("Clients", style="yellow")

    names = _names_in_order(lock, installed)
    for name in names:
        entries = lock.find(name) if lock is not None else []
        declared = describe_placement(entries[0].placement) if entries else "[dim]-[/dim]"
        version = entries[0].version if entries else ", ".join(sorted(versions.get(name, set())))
        asset_type = entries[0].type if entries else "-"
        placement = placement_from_targets(installed.get(name, []), repo_label)
        table.add_row(
            name,
            version,
            asset_type,
            declared,
            describe_placement(placement),
            ", ".join(sorted(clients.get(name, set()))) or "-",
        )

    # Output table to stderr (consistent with user_output convention)
    console = Console(stderr=True, force_terminal=True, width=200)
    console.print(table)


def _names_in_order(lock: LockFile | None, installed: dict[str, list[InstallTarget]]) -> list[str]:
    names: list[str] = []
    if lock is not None:
        for entry in lock.assets:
            if entry.name not in names:
                names.append(entry.name)
    for name in sorted(installed):
        if name not in names:
            names.append(name)
    return names

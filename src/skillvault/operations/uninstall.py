"""Uninstall: remove tracked installations without touching the lock file."""

import logging
from pathlib import Path

from skillvault.clients.registry import ClientRegistry, parse_client_list
from skillvault.core.context import SkillvaultContext
from skillvault.core.repo_context import detect_repo_context
from skillvault.core.scope import TargetBase
from skillvault.operations.install import load_trackers
from skillvault.operations.planning import ReconcilePlan, assemble_plan, collect_actual
from skillvault.tracker.models import Tracker

logger = logging.getLogger(__name__)


def build_uninstall_plan(
    trackers: dict[TargetBase, Tracker],
    registry: ClientRegistry,
    *,
    names: list[str] | None,
    client_filter: list[str] | None,
) -> ReconcilePlan:
    """Plan removal of tracked assets.

    Args:
        names: Asset names to remove; None removes everything tracked
        client_filter: Restrict removal to these client ids
    """
    actual = collect_actual(trackers, client_filter)
    if names is not None:
        actual = [item for item in actual if item.asset.name in names]
    return assemble_plan(
        bases=tuple(trackers),
        registry=registry,
        desired=[],
        installs=[],
        uninstalls=actual,
    )


def prepare_uninstall(
    ctx: SkillvaultContext,
    *,
    names: list[str] | None,
    target: Path | None,
    clients_csv: str | None,
) -> tuple[dict[TargetBase, Tracker], ReconcilePlan]:
    """Load trackers for the applicable bases and plan the removal.

    Raises:
        ConfigurationError: Bad --target or unknown client
    """
    client_filter = parse_client_list(clients_csv)
    for client_id in client_filter or []:
        ctx.registry.get_client(client_id)
    context = detect_repo_context(ctx.git, ctx.cwd, target)
    trackers = load_trackers(ctx, context)
    plan = build_uninstall_plan(
        trackers, ctx.registry, names=names, client_filter=client_filter
    )
    logger.debug("Planned %d uninstalls", len(plan.uninstalls))
    return trackers, plan

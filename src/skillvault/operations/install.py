"""Install: reconcile the vault's lock file with what is installed locally."""

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from skillvault.clients.base import Client
from skillvault.clients.registry import parse_client_list
from skillvault.core.context import SkillvaultContext
from skillvault.core.repo_context import detect_repo_context
from skillvault.core.scope import InstallTarget, RepoContext, TargetBase
from skillvault.lockfile.io import fetch_lock_file
from skillvault.lockfile.models import LockFile
from skillvault.operations.planning import (
    ReconcilePlan,
    TripleKey,
    applicable_bases,
    build_reconcile_plan,
)
from skillvault.operations.reconcile import ReconcileResult, execute_plan
from skillvault.tracker.models import Tracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstallSession:
    """Everything loaded before planning. Building it performs no mutation."""

    context: RepoContext | None
    lock: LockFile
    trackers: dict[TargetBase, Tracker]
    clients: list[Client]
    client_filter: list[str] | None


def load_trackers(ctx: SkillvaultContext, context: RepoContext | None) -> dict[TargetBase, Tracker]:
    return {base: ctx.tracker_store.load(base) for base in applicable_bases(context)}


def prepare_install(
    ctx: SkillvaultContext, *, target: Path | None, clients_csv: str | None
) -> InstallSession:
    """Load desired and actual state for an install run.

    Raises:
        ConfigurationError: No vault, bad --target or unknown client
        LockFileError: The lock file is invalid
    """
    vault = ctx.require_vault()
    client_filter = parse_client_list(clients_csv)
    clients = ctx.registry.select_clients(ctx.config, client_filter)
    context = detect_repo_context(ctx.git, ctx.cwd, target)
    lock = fetch_lock_file(vault, ctx.lock_cache)
    logger.debug(
        "Loaded lock file with %d assets; clients=%s",
        len(lock.assets),
        [c.client_id for c in clients],
    )
    return InstallSession(
        context=context,
        lock=lock,
        trackers=load_trackers(ctx, context),
        clients=clients,
        client_filter=client_filter,
    )


def find_missing_on_disk(ctx: SkillvaultContext, session: InstallSession) -> frozenset[TripleKey]:
    """Tracked triples whose files are gone, so a repair run reinstalls them."""
    missing: set[TripleKey] = set()
    for base, tracker in session.trackers.items():
        for entry in tracker.assets:
            target = InstallTarget.within(base, entry.path)
            for client_id in entry.clients:
                client = ctx.registry.find_client(client_id)
                if client is None or not client.supports_asset_type(entry.type):
                    continue
                if not client.is_materialized(entry.asset, target):
                    missing.add((entry.name, entry.version, client_id, target))
    return frozenset(missing)


def plan_install(ctx: SkillvaultContext, session: InstallSession, *, repair: bool) -> ReconcilePlan:
    missing = find_missing_on_disk(ctx, session) if repair else frozenset()
    return build_reconcile_plan(
        session.lock,
        session.trackers,
        session.clients,
        ctx.registry,
        session.context,
        client_filter=session.client_filter,
        missing_on_disk=missing,
    )


def apply_plan(
    ctx: SkillvaultContext, trackers: dict[TargetBase, Tracker], plan: ReconcilePlan
) -> ReconcileResult:
    """Execute plan, saving trackers as work completes.

    Raises:
        NoVaultConfiguredError: If the plan installs anything and no vault is set
        FetchError: If nothing could be downloaded
    """
    deadline = time.monotonic() + ctx.config.timeout_seconds
    return execute_plan(
        plan,
        trackers,
        ctx.vault,
        persist=ctx.tracker_store.save,
        fetch_concurrency=ctx.config.concurrency,
        deadline=deadline,
        cache=ctx.asset_cache,
    )

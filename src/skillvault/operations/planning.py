"""Reconcile planning: expand desired state, diff it against actual state.

Everything here is pure: given a lock file, the trackers of the target bases
in play and the clients to consider, it computes which (asset, client,
target) triples to install and which to uninstall. Nothing touches disk.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from skillvault.clients.base import Client
from skillvault.clients.registry import ClientRegistry
from skillvault.core.assets import Asset
from skillvault.core.scope import InstallTarget, RepoContext, Scope, TargetBase, resolve_scope
from skillvault.lockfile.models import LockedAsset, LockFile
from skillvault.tracker.models import Tracker

logger = logging.getLogger(__name__)

TripleKey = tuple[str, str, str, InstallTarget]


@dataclass(frozen=True)
class PlannedItem:
    """One (asset, client, target) triple scheduled for install or uninstall.

    location_key identifies the file or config entry the client writes for
    this triple; two triples with the same location_key touch the same bytes
    on disk. tracker_only items change the tracker without touching disk,
    because another triple owns the same physical location.
    """

    asset: Asset
    client_id: str
    target: InstallTarget
    lock_entry: LockedAsset | None = None
    location_key: tuple[str, str | None] = ("", None)
    tracker_only: bool = False

    @property
    def key(self) -> TripleKey:
        return (self.asset.name, self.asset.version, self.client_id, self.target)

    @property
    def base(self) -> TargetBase:
        return self.target.base


@dataclass(frozen=True)
class PlanConflict:
    """Different assets that one client would write to the same location."""

    client_id: str
    location: str
    items: tuple[PlannedItem, ...]

    @property
    def message(self) -> str:
        keys = ", ".join(sorted({item.asset.key for item in self.items}))
        return f"conflicting assets target {self.location}: {keys}"


@dataclass(frozen=True)
class ClientPlan:
    """Operations for one client, executed in order: uninstalls, then installs."""

    client: Client
    uninstalls: tuple[PlannedItem, ...]
    installs: tuple[PlannedItem, ...]

    @property
    def client_id(self) -> str:
        return self.client.client_id

    @property
    def is_empty(self) -> bool:
        return not self.uninstalls and not self.installs


@dataclass(frozen=True)
class InstallPlanEntry:
    """Summary of one asset's pending installs, for display."""

    asset: Asset
    is_global: bool
    clients: tuple[str, ...]
    lock_entry: LockedAsset | None


@dataclass(frozen=True)
class ReconcilePlan:
    """The computed diff for one reconcile run.

    orphans are tracked triples whose client is not registered any more; they
    cannot be uninstalled and are reported as failures.
    """

    bases: tuple[TargetBase, ...]
    client_plans: tuple[ClientPlan, ...]
    conflicts: tuple[PlanConflict, ...] = ()
    orphans: tuple[PlannedItem, ...] = field(default_factory=tuple)

    @property
    def installs(self) -> list[PlannedItem]:
        return [item for plan in self.client_plans for item in plan.installs]

    @property
    def uninstalls(self) -> list[PlannedItem]:
        return [item for plan in self.client_plans for item in plan.uninstalls]

    @property
    def is_empty(self) -> bool:
        return (
            all(plan.is_empty for plan in self.client_plans)
            and not self.conflicts
            and not self.orphans
        )

    def assets_to_fetch(self) -> list[Asset]:
        """Distinct assets that need a payload, each listed once."""
        seen: list[Asset] = []
        for item in self.installs:
            if not item.tracker_only and item.asset not in seen:
                seen.append(item.asset)
        return seen

    def install_plan_entries(self) -> list[InstallPlanEntry]:
        grouped: dict[tuple[Asset, bool], list[PlannedItem]] = {}
        for item in self.installs:
            grouped.setdefault((item.asset, item.target.is_global), []).append(item)
        entries: list[InstallPlanEntry] = []
        for (asset, is_global), items in grouped.items():
            clients = tuple(sorted({item.client_id for item in items}))
            entries.append(
                InstallPlanEntry(
                    asset=asset,
                    is_global=is_global,
                    clients=clients,
                    lock_entry=items[0].lock_entry,
                )
            )
        return entries


def applicable_bases(context: RepoContext | None) -> tuple[TargetBase, ...]:
    """Target bases a run operates on: always global, plus the current repository."""
    if context is None:
        return (TargetBase.global_base(),)
    return (TargetBase.global_base(), TargetBase(repo_root=context.root))


def expand_desired(
    lock: LockFile, clients: Iterable[Client], context: RepoContext | None
) -> list[PlannedItem]:
    """Expand lock entries into desired (asset, client, target) triples."""
    client_list = list(clients)
    desired: dict[TripleKey, PlannedItem] = {}
    for entry in lock.assets:
        scopes = entry.scopes or (Scope.global_scope(),)
        for scope in scopes:
            targets = resolve_scope(scope, context)
            if not targets:
                logger.debug("Scope %s of %s does not apply here", scope, entry.key)
                continue
            for client in client_list:
                if not client.supports_asset_type(entry.type):
                    continue
                if not entry.allows_client(client.client_id):
                    continue
                for target in targets:
                    item = PlannedItem(
                        asset=entry.asset,
                        client_id=client.client_id,
                        target=target,
                        lock_entry=entry,
                        location_key=_location_key(client, entry.asset, target),
                    )
                    desired.setdefault(item.key, item)
    return list(desired.values())


def collect_actual(
    trackers: dict[TargetBase, Tracker],
    client_filter: list[str] | None,
    missing_on_disk: frozenset[TripleKey] = frozenset(),
) -> list[PlannedItem]:
    """Flatten trackers into actual triples.

    Triples for clients outside client_filter are left out so they are neither
    kept nor removed. Triples in missing_on_disk are treated as not installed.
    """
    actual: list[PlannedItem] = []
    for base, tracker in trackers.items():
        for entry in tracker.assets:
            target = InstallTarget.within(base, entry.path)
            for client_id in entry.clients:
                if client_filter is not None and client_id not in client_filter:
                    continue
                item = PlannedItem(asset=entry.asset, client_id=client_id, target=target)
                if item.key in missing_on_disk:
                    logger.debug("%s is tracked but missing on disk", item.key)
                    continue
                actual.append(item)
    return actual


def build_reconcile_plan(
    lock: LockFile,
    trackers: dict[TargetBase, Tracker],
    clients: list[Client],
    registry: ClientRegistry,
    context: RepoContext | None,
    *,
    client_filter: list[str] | None = None,
    missing_on_disk: frozenset[TripleKey] = frozenset(),
) -> ReconcilePlan:
    """Diff desired state against actual state.

    Args:
        lock: Desired state
        trackers: Actual state for each target base in play
        clients: Clients that should receive assets in this run
        registry: All registered clients, used to uninstall from clients that
            are no longer selected
        context: Current repository context, if any
        client_filter: When set, only these client ids are considered at all
        missing_on_disk: Tracked triples to treat as not installed (repair)
    """
    desired = expand_desired(lock, clients, context)
    desired_keys = {item.key for item in desired}
    # A missing triple that is no longer desired still needs its tracker entry removed
    reinstall = frozenset(key for key in missing_on_disk if key in desired_keys)
    actual = collect_actual(trackers, client_filter, reinstall)
    actual_keys = {item.key for item in actual}

    install_items = [item for item in desired if item.key not in actual_keys]
    uninstall_items = [item for item in actual if item.key not in desired_keys]

    return assemble_plan(
        bases=tuple(trackers),
        registry=registry,
        desired=desired,
        installs=install_items,
        uninstalls=uninstall_items,
    )


def assemble_plan(
    *,
    bases: tuple[TargetBase, ...],
    registry: ClientRegistry,
    desired: list[PlannedItem],
    installs: list[PlannedItem],
    uninstalls: list[PlannedItem],
) -> ReconcilePlan:
    """Group items per client, detecting location conflicts and shared locations."""
    client_ids: list[str] = []
    for item in (*installs, *uninstalls):
        if item.client_id not in client_ids:
            client_ids.append(item.client_id)

    client_plans: list[ClientPlan] = []
    conflicts: list[PlanConflict] = []
    orphans: list[PlannedItem] = []

    for client_id in sorted(client_ids):
        client = registry.find_client(client_id)
        client_uninstalls = [item for item in uninstalls if item.client_id == client_id]
        if client is None:
            logger.warning("Tracked client '%s' is not registered; cannot uninstall", client_id)
            orphans.extend(client_uninstalls)
            continue

        client_desired = [item for item in desired if item.client_id == client_id]
        client_conflicts = _find_conflicts(client_id, client_desired)
        conflicts.extend(client_conflicts)
        conflicted = {item.key for conflict in client_conflicts for item in conflict.items}

        planned_installs = _dedupe_installs(
            [i for i in installs if i.client_id == client_id and i.key not in conflicted]
        )
        planned_uninstalls = _mark_shared_uninstalls(
            client, [_with_location(client, item) for item in client_uninstalls], client_desired
        )
        plan = ClientPlan(
            client=client,
            uninstalls=tuple(planned_uninstalls),
            installs=tuple(planned_installs),
        )
        if not plan.is_empty:
            client_plans.append(plan)

    return ReconcilePlan(
        bases=bases,
        client_plans=tuple(client_plans),
        conflicts=tuple(conflicts),
        orphans=tuple(orphans),
    )


def _location_key(client: Client, asset: Asset, target: InstallTarget) -> tuple[str, str | None]:
    return client.location_for(asset, client.physical_target(target)).identity


def _with_location(client: Client, item: PlannedItem) -> PlannedItem:
    return replace(item, location_key=_location_key(client, item.asset, item.target))


def _find_conflicts(client_id: str, desired: list[PlannedItem]) -> list[PlanConflict]:
    by_location: dict[tuple[str, str | None], list[PlannedItem]] = {}
    for item in desired:
        by_location.setdefault(item.location_key, []).append(item)

    conflicts: list[PlanConflict] = []
    for location_key, items in by_location.items():
        if len({item.asset for item in items}) > 1:
            location = location_key[0] if location_key[1] is None else "#".join(location_key)
            conflicts.append(
                PlanConflict(client_id=client_id, location=location, items=tuple(items))
            )
    return conflicts


def _dedupe_installs(installs: list[PlannedItem]) -> list[PlannedItem]:
    """Mark every install after the first at a shared location as tracker-only."""
    seen: set[tuple[str, str | None]] = set()
    planned: list[PlannedItem] = []
    for item in installs:
        if item.location_key in seen:
            planned.append(_tracker_only(item))
            continue
        seen.add(item.location_key)
        planned.append(item)
    return planned


def _mark_shared_uninstalls(
    client: Client, uninstalls: list[PlannedItem], desired: list[PlannedItem]
) -> list[PlannedItem]:
    """Uninstalls whose location still holds a desired copy of the same asset
    only drop the tracker entry; removing the files would delete the desired copy.
    """
    claimed = {(item.location_key, item.asset) for item in desired}
    seen: set[tuple[str, str | None]] = set()
    planned: list[PlannedItem] = []
    for item in uninstalls:
        if (item.location_key, item.asset) in claimed or item.location_key in seen:
            planned.append(_tracker_only(item))
            continue
        seen.add(item.location_key)
        planned.append(item)
    logger.debug("Planned %d uninstalls for %s", len(planned), client.client_id)
    return planned


def _tracker_only(item: PlannedItem) -> PlannedItem:
    return replace(item, tracker_only=True)

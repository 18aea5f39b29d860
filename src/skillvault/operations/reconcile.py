"""Execute a reconcile plan and keep trackers consistent with the outcome."""

import logging
import time
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Literal

from skillvault.clients.base import InstallItem, ItemResult
from skillvault.core.assets import Asset
from skillvault.core.cache import AssetCache
from skillvault.core.errors import FetchError, NoVaultConfiguredError
from skillvault.core.scope import InstallTarget, TargetBase
from skillvault.operations.fetcher import (
    DEFAULT_FETCH_CONCURRENCY,
    DownloadResult,
    fetch_all,
    partition_results,
)
from skillvault.operations.planning import ClientPlan, PlannedItem, ReconcilePlan
from skillvault.tracker.models import Tracker
from skillvault.vault.abc import Vault

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_CONCURRENCY = 4

Action = Literal["install", "uninstall"]


@dataclass(frozen=True)
class ReportItem:
    """Outcome of one planned triple."""

    asset: Asset
    client_id: str
    target: InstallTarget
    action: Action
    status: Literal["success", "failed", "skipped"]
    message: str = ""
    error: str | None = None


@dataclass(frozen=True)
class ReconcileReport:
    items: tuple[ReportItem, ...] = field(default_factory=tuple)

    @property
    def has_failures(self) -> bool:
        return any(item.status == "failed" for item in self.items)

    @property
    def failures(self) -> list[ReportItem]:
        return [item for item in self.items if item.status == "failed"]

    @property
    def successes(self) -> list[ReportItem]:
        return [item for item in self.items if item.status == "success"]


@dataclass(frozen=True)
class ReconcileResult:
    report: ReconcileReport
    trackers: dict[TargetBase, Tracker]


@dataclass(frozen=True)
class _ClientOutcome:
    client_id: str
    results: tuple[tuple[PlannedItem, Action, ItemResult], ...]


def execute_plan(
    plan: ReconcilePlan,
    trackers: dict[TargetBase, Tracker],
    vault: Vault | None,
    *,
    persist: Callable[[Tracker], None],
    fetch_concurrency: int = DEFAULT_FETCH_CONCURRENCY,
    client_concurrency: int = DEFAULT_CLIENT_CONCURRENCY,
    deadline: float | None = None,
    cache: AssetCache | None = None,
) -> ReconcileResult:
    """Fetch payloads, run every client's operations and update trackers.

    persist is called with a base's tracker each time a client's operations
    finish and changed it, so completed work is recorded even if a later
    client fails or the deadline passes.

    Raises:
        FetchError: If assets had to be downloaded and none succeeded
    """
    report: list[ReportItem] = []
    current = dict(trackers)

    payloads, fetch_failures = _fetch_payloads(
        plan, vault, fetch_concurrency=fetch_concurrency, deadline=deadline, cache=cache
    )

    for conflict in plan.conflicts:
        for item in conflict.items:
            report.append(_failed(item, "install", conflict.message))
    for item in plan.orphans:
        report.append(_failed(item, "uninstall", f"client '{item.client_id}' is not registered"))

    if not plan.client_plans:
        return ReconcileResult(report=_sorted_report(report), trackers=current)

    executor = ThreadPoolExecutor(
        max_workers=max(1, client_concurrency), thread_name_prefix="client"
    )
    try:
        futures: dict[Future[_ClientOutcome], ClientPlan] = {
            executor.submit(_run_client, client_plan, payloads, fetch_failures): client_plan
            for client_plan in plan.client_plans
        }
        pending = set(futures)
        while pending:
            timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
            done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
            if not done:
                break
            for future in done:
                client_plan = futures[future]
                try:
                    outcome = future.result()
                except Exception as e:
                    # Report this client failed; other clients still apply their results
                    logger.exception("Client %s failed unexpectedly", client_plan.client_id)
                    report.extend(_fail_client_plan(client_plan, f"unexpected error: {e}"))
                    continue
                touched = _apply_outcome(current, outcome, report)
                for base in touched:
                    persist(current.get(base, Tracker.empty(base)))

        for future in pending:
            client_plan = futures[future]
            logger.warning("Deadline passed before %s finished", client_plan.client_id)
            report.extend(_fail_client_plan(client_plan, "deadline exceeded"))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return ReconcileResult(report=_sorted_report(report), trackers=current)


def _fetch_payloads(
    plan: ReconcilePlan,
    vault: Vault | None,
    *,
    fetch_concurrency: int,
    deadline: float | None,
    cache: AssetCache | None,
) -> tuple[dict[Asset, bytes], dict[Asset, str]]:
    assets = plan.assets_to_fetch()
    if not assets:
        return {}, {}
    if vault is None:
        raise NoVaultConfiguredError()

    results = fetch_all(
        vault, assets, concurrency=fetch_concurrency, deadline=deadline, cache=cache
    )
    downloaded, failed = partition_results(results)
    if not downloaded:
        details = "; ".join(f"{r.asset.key}: {r.error}" for r in failed)
        raise FetchError(f"No assets downloaded successfully ({details})")

    for result in failed:
        logger.warning("Failed to download %s: %s", result.asset.key, result.error)
    return _payload_map(downloaded), {r.asset: str(r.error) for r in failed}


def _payload_map(downloaded: list[DownloadResult]) -> dict[Asset, bytes]:
    payloads: dict[Asset, bytes] = {}
    for result in downloaded:
        if result.payload is not None:
            payloads[result.asset] = result.payload
    return payloads


def _run_client(
    plan: ClientPlan, payloads: dict[Asset, bytes], fetch_failures: dict[Asset, str]
) -> _ClientOutcome:
    """Run one client's uninstalls and then its installs.

    Runs on a worker thread; it only touches this client's directories and
    returns results instead of mutating shared state.
    """
    client = plan.client
    results: list[tuple[PlannedItem, Action, ItemResult]] = []

    physical_status: dict[tuple[str, str | None], ItemResult] = {}
    for target, items in _group_by_target([i for i in plan.uninstalls if not i.tracker_only]):
        item_results = client.uninstall([item.asset for item in items], target)
        for item, result in zip(items, item_results, strict=True):
            physical_status[item.location_key] = result
            results.append((item, "uninstall", result))
    for item in plan.uninstalls:
        if not item.tracker_only:
            continue
        shared = physical_status.get(item.location_key)
        if shared is not None and shared.failed:
            results.append((item, "uninstall", _item_failed(item.asset, shared.error)))
        else:
            results.append((item, "uninstall", ItemResult(asset=item.asset, status="success")))

    blocked = {key for key, result in physical_status.items() if result.failed}
    runnable: list[PlannedItem] = []
    for item in plan.installs:
        if item.tracker_only:
            continue
        if item.location_key in blocked:
            message = "previous version could not be removed"
            results.append((item, "install", _item_failed(item.asset, message)))
            continue
        if item.asset not in payloads:
            reason = fetch_failures.get(item.asset, "payload unavailable")
            failure = _item_failed(item.asset, f"download failed: {reason}")
            results.append((item, "install", failure))
            continue
        runnable.append(item)

    installed: dict[tuple[str, str | None], ItemResult] = {}
    for target, items in _group_by_target(runnable):
        install_items = [InstallItem(asset=i.asset, payload=payloads[i.asset]) for i in items]
        item_results = client.install(install_items, target)
        for item, result in zip(items, item_results, strict=True):
            installed[item.location_key] = result
            results.append((item, "install", result))
    for item in plan.installs:
        if not item.tracker_only:
            continue
        primary = installed.get(item.location_key)
        if primary is None:
            failure = _item_failed(item.asset, "shared install did not run")
            results.append((item, "install", failure))
        else:
            results.append((item, "install", primary))

    logger.debug("Client %s finished %d operations", client.client_id, len(results))
    return _ClientOutcome(client_id=client.client_id, results=tuple(results))


def _group_by_target(items: list[PlannedItem]) -> list[tuple[InstallTarget, list[PlannedItem]]]:
    grouped: dict[InstallTarget, list[PlannedItem]] = {}
    for item in items:
        grouped.setdefault(item.target, []).append(item)
    return list(grouped.items())


def _apply_outcome(
    trackers: dict[TargetBase, Tracker], outcome: _ClientOutcome, report: list[ReportItem]
) -> set[TargetBase]:
    """Fold one client's results into trackers and the report.

    Only successful operations change a tracker.
    """
    touched: set[TargetBase] = set()
    for item, action, result in outcome.results:
        report.append(
            ReportItem(
                asset=item.asset,
                client_id=item.client_id,
                target=item.target,
                action=action,
                status=result.status,
                message=result.message,
                error=result.error,
            )
        )
        if result.failed:
            continue
        base = item.base
        tracker = trackers.get(base, Tracker.empty(base))
        if action == "uninstall":
            trackers[base] = tracker.without_client(
                item.asset.name, item.asset.version, item.target.path, item.client_id
            )
        elif result.succeeded:
            trackers[base] = tracker.with_client(item.asset, item.target.path, item.client_id)
        else:
            continue
        touched.add(base)
    return touched


def _item_failed(asset: Asset, error: str | None) -> ItemResult:
    return ItemResult(asset=asset, status="failed", error=error)


def _fail_client_plan(client_plan: ClientPlan, error: str) -> list[ReportItem]:
    failures = [_failed(item, "uninstall", error) for item in client_plan.uninstalls]
    failures.extend(_failed(item, "install", error) for item in client_plan.installs)
    return failures


def _failed(item: PlannedItem, action: Action, error: str) -> ReportItem:
    return ReportItem(
        asset=item.asset,
        client_id=item.client_id,
        target=item.target,
        action=action,
        status="failed",
        error=error,
    )


def _sorted_report(items: list[ReportItem]) -> ReconcileReport:
    ordered = sorted(
        items,
        key=lambda i: (i.asset.name, i.asset.version, i.client_id, i.target.describe(), i.action),
    )
    return ReconcileReport(items=tuple(ordered))

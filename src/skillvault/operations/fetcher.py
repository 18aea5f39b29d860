"""Bounded-concurrency download of asset payloads from the vault."""

import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass

from skillvault.core.assets import Asset
from skillvault.core.cache import AssetCache
from skillvault.core.errors import DeadlineExceededError, SkillvaultError
from skillvault.core.payload import AssetPayload, InvalidPayloadError
from skillvault.vault.abc import Vault

logger = logging.getLogger(__name__)

DEFAULT_FETCH_CONCURRENCY = 10


@dataclass(frozen=True)
class DownloadResult:
    """Outcome of downloading one asset. Exactly one of payload and error is set."""

    asset: Asset
    payload: bytes | None
    error: Exception | None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None


def _download_one(vault: Vault, asset: Asset, cache: AssetCache | None) -> bytes:
    if cache is not None:
        cached = cache.load(asset)
        if cached is not None:
            try:
                AssetPayload(cached)
            except InvalidPayloadError as e:
                logger.warning("Discarding unreadable cached payload for %s: %s", asset.key, e)
                cache.discard(asset)
            else:
                return cached

    data = vault.get_asset_by_version(asset.name, asset.version)
    # Validate before anything downstream tries to extract it
    AssetPayload(data)

    if cache is not None:
        cache.save(asset, data)
    return data


def fetch_all(
    vault: Vault,
    assets: list[Asset],
    *,
    concurrency: int = DEFAULT_FETCH_CONCURRENCY,
    deadline: float | None = None,
    cache: AssetCache | None = None,
) -> list[DownloadResult]:
    """Download every asset with at most `concurrency` retrievals in flight.

    Each asset's failure is captured in its own result; other downloads keep
    going. Downloads still running at the deadline (a time.monotonic() value)
    are abandoned and reported as DeadlineExceededError.

    Returns:
        One DownloadResult per input asset, in input order
    """
    if not assets:
        return []

    results: dict[int, DownloadResult] = {}
    executor = ThreadPoolExecutor(max_workers=max(1, concurrency), thread_name_prefix="fetch")
    try:
        futures: dict[Future[bytes], int] = {
            executor.submit(_download_one, vault, asset, cache): index
            for index, asset in enumerate(assets)
        }
        pending = set(futures)
        while pending:
            timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
            done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
            if not done:
                break
            for future in done:
                index = futures[future]
                results[index] = _result_from_future(assets[index], future)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    for index, asset in enumerate(assets):
        if index not in results:
            logger.debug("Abandoning download of %s at deadline", asset.key)
            results[index] = DownloadResult(
                asset=asset,
                payload=None,
                error=DeadlineExceededError(f"Download of {asset.key} did not finish in time"),
            )
    return [results[index] for index in range(len(assets))]


def _result_from_future(asset: Asset, future: "Future[bytes]") -> DownloadResult:
    try:
        payload = future.result()
    except (SkillvaultError, InvalidPayloadError, OSError) as e:
        logger.debug("Download of %s failed: %s", asset.key, e)
        return DownloadResult(asset=asset, payload=None, error=e)
    return DownloadResult(asset=asset, payload=payload, error=None)


def partition_results(
    results: list[DownloadResult],
) -> tuple[list[DownloadResult], list[DownloadResult]]:
    """Split results into (downloaded, failed)."""
    downloaded = [result for result in results if result.ok]
    failed = [result for result in results if not result.ok]
    return downloaded, failed

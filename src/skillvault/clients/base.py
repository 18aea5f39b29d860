"""Client capability interface.

A client is one AI coding tool skillvault installs assets into. Each client
declares which asset types it understands, whether it reads assets from
sub-directories of a repository, and where each asset lives on disk.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from skillvault.clients.materialize import (
    AssetLocation,
    MaterializationError,
    exists_at,
    install_at,
    remove_at,
)
from skillvault.core.assets import Asset, AssetType
from skillvault.core.payload import AssetPayload, InvalidPayloadError
from skillvault.core.scope import InstallTarget, RepoContext, Scope, resolve_scope

logger = logging.getLogger(__name__)

ItemStatus = Literal["success", "failed", "skipped"]


@dataclass(frozen=True)
class ItemResult:
    """Outcome of installing or uninstalling one asset on one client."""

    asset: Asset
    status: ItemStatus
    message: str = ""
    error: str | None = None

    @property
    def asset_name(self) -> str:
        return self.asset.name

    @property
    def succeeded(self) -> bool:
        return self.status == "success"

    @property
    def failed(self) -> bool:
        return self.status == "failed"


@dataclass(frozen=True)
class InstallItem:
    """An asset paired with its downloaded payload bytes."""

    asset: Asset
    payload: bytes


class Client(ABC):
    """Abstract base class for AI tool integrations."""

    @property
    @abstractmethod
    def client_id(self) -> str:
        """Stable identifier used in config, CLI flags and trackers (e.g., 'claude-code')."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    @property
    @abstractmethod
    def supported_types(self) -> frozenset[str]:
        ...

    @property
    def supports_subpath_scope(self) -> bool:
        """Whether the tool discovers assets below the repository root.

        Clients that only read from the repository root install path-scoped
        assets at the root instead.
        """
        return True

    @abstractmethod
    def is_detected(self) -> bool:
        """Whether the tool appears to be installed on this machine."""
        ...

    @abstractmethod
    def base_dir(self, target: InstallTarget) -> Path:
        """The tool's configuration directory for target."""
        ...

    @abstractmethod
    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        """Where asset is materialized for target."""
        ...

    def supports_asset_type(self, asset_type: AssetType | str) -> bool:
        return asset_type in self.supported_types

    def physical_target(self, target: InstallTarget) -> InstallTarget:
        """Map a logical target to the one this client actually writes to."""
        if target.kind == "path" and not self.supports_subpath_scope:
            return target.at_repo_root()
        return target

    def install_targets_for(self, scope: Scope, context: RepoContext | None) -> list[Path]:
        """Directories this client would install a scope's assets into."""
        paths: list[Path] = []
        for target in resolve_scope(scope, context):
            path = self.base_dir(self.physical_target(target))
            if path not in paths:
                paths.append(path)
        return paths

    def is_materialized(self, asset: Asset, target: InstallTarget) -> bool:
        return exists_at(self.location_for(asset, self.physical_target(target)), asset)

    def install(self, items: list[InstallItem], target: InstallTarget) -> list[ItemResult]:
        """Install each item at target. One item's failure never stops the others."""
        results: list[ItemResult] = []
        physical = self.physical_target(target)
        for item in items:
            asset = item.asset
            if not self.supports_asset_type(asset.type):
                results.append(
                    ItemResult(
                        asset=asset,
                        status="skipped",
                        message=f"{self.display_name} does not support {asset.type} assets",
                    )
                )
                continue
            location = self.location_for(asset, physical)
            try:
                install_at(location, asset, AssetPayload(item.payload))
            except (MaterializationError, InvalidPayloadError, OSError) as e:
                logger.debug("Install of %s on %s failed: %s", asset.key, self.client_id, e)
                results.append(ItemResult(asset=asset, status="failed", error=str(e)))
                continue
            results.append(
                ItemResult(asset=asset, status="success", message=f"installed to {location.path}")
            )
        return results

    def uninstall(self, assets: list[Asset], target: InstallTarget) -> list[ItemResult]:
        """Remove each asset from target. One item's failure never stops the others."""
        results: list[ItemResult] = []
        physical = self.physical_target(target)
        for asset in assets:
            if not self.supports_asset_type(asset.type):
                results.append(
                    ItemResult(
                        asset=asset,
                        status="skipped",
                        message=f"{self.display_name} does not support {asset.type} assets",
                    )
                )
                continue
            location = self.location_for(asset, physical)
            try:
                remove_at(location, asset)
            except (MaterializationError, OSError) as e:
                logger.debug("Uninstall of %s on %s failed: %s", asset.key, self.client_id, e)
                results.append(ItemResult(asset=asset, status="failed", error=str(e)))
                continue
            results.append(
                ItemResult(asset=asset, status="success", message=f"removed {location.path}")
            )
        return results


def repo_dir(target: InstallTarget, dirname: str) -> Path:
    """Resolve <repo_root>[/<path>]/<dirname> for a repository target."""
    if target.repo_root is None:
        raise ValueError("repo_dir requires a repository target")
    if target.kind == "path":
        return target.repo_root / target.path / dirname
    return target.repo_root / dirname

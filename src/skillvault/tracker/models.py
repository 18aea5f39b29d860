"""Installed-assets tracker: the actual state of one target base."""

from dataclasses import dataclass, replace

from skillvault.core.assets import Asset, AssetType
from skillvault.core.scope import TargetBase

TRACKER_VERSION = "1"


@dataclass(frozen=True)
class TrackedAsset:
    """An asset version materialized at one target by one or more clients.

    path is the repository-relative scope path, "" for the repository root or
    for global installs.
    """

    name: str
    version: str
    type: AssetType
    path: str
    clients: tuple[str, ...]

    @property
    def asset(self) -> Asset:
        return Asset(name=self.name, version=self.version, type=self.type)

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class Tracker:
    """Tracker document for one target base.

    An entry exists only while at least one client retains it.
    """

    base: TargetBase
    assets: tuple[TrackedAsset, ...] = ()

    @staticmethod
    def empty(base: TargetBase) -> "Tracker":
        return Tracker(base=base, assets=())

    @property
    def is_empty(self) -> bool:
        return not self.assets

    def find(self, name: str, version: str, path: str) -> TrackedAsset | None:
        for entry in self.assets:
            if entry.name == name and entry.version == version and entry.path == path:
                return entry
        return None

    def with_client(self, asset: Asset, path: str, client_id: str) -> "Tracker":
        """Record that client_id has asset installed at path."""
        existing = self.find(asset.name, asset.version, path)
        if existing is None:
            added = TrackedAsset(
                name=asset.name,
                version=asset.version,
                type=asset.type,
                path=path,
                clients=(client_id,),
            )
            return replace(self, assets=(*self.assets, added))
        if client_id in existing.clients:
            return self
        updated = replace(existing, clients=tuple(sorted((*existing.clients, client_id))))
        assets = tuple(updated if entry is existing else entry for entry in self.assets)
        return replace(self, assets=assets)

    def without_client(self, name: str, version: str, path: str, client_id: str) -> "Tracker":
        """Drop client_id from an entry, deleting the entry once no client retains it."""
        assets: list[TrackedAsset] = []
        for entry in self.assets:
            if entry.name == name and entry.version == version and entry.path == path:
                remaining = tuple(c for c in entry.clients if c != client_id)
                if not remaining:
                    continue
                entry = replace(entry, clients=remaining)
            assets.append(entry)
        return replace(self, assets=tuple(assets))

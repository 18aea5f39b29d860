"""Lock file models: the desired state of every asset the vault distributes."""

from dataclasses import dataclass, field, replace

from skillvault.core.assets import Asset, AssetType
from skillvault.core.scope import Global, Scope, Scoped, placement_of

LOCK_FILE_NAME = "skillvault.lock"
LOCK_VERSION = "1"


@dataclass(frozen=True)
class LockedAsset:
    """One asset entry of the lock file.

    Attributes:
        name: Asset name
        version: Pinned version
        type: Asset type
        source_path: Location of the payload inside the vault
        scopes: Declared placements; empty means global
        clients: Client ids allowed to receive the asset; empty means all
        dependencies: Names of assets this one expects alongside it
    """

    name: str
    version: str
    type: AssetType
    source_path: str
    scopes: tuple[Scope, ...] = ()
    clients: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()

    @property
    def asset(self) -> Asset:
        return Asset(name=self.name, version=self.version, type=self.type)

    @property
    def key(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def placement(self) -> Global | Scoped:
        return placement_of(self.scopes)

    def allows_client(self, client_id: str) -> bool:
        return not self.clients or client_id in self.clients

    def with_scopes(self, scopes: tuple[Scope, ...]) -> "LockedAsset":
        return replace(self, scopes=scopes)


@dataclass(frozen=True)
class LockFile:
    """Desired state document.

    Entries are kept in insertion order; updates return new LockFile objects.
    """

    lock_version: str
    version: str
    created_by: str
    assets: tuple[LockedAsset, ...] = field(default_factory=tuple)

    def find(self, name: str, version: str | None = None) -> list[LockedAsset]:
        return [
            entry
            for entry in self.assets
            if entry.name == name and (version is None or entry.version == version)
        ]

    def upsert(self, entry: LockedAsset) -> "LockFile":
        """Insert an entry, replacing any existing entry with the same name.

        Adding a new version of an asset replaces the previous pin.
        """
        assets: list[LockedAsset] = []
        replaced = False
        for existing in self.assets:
            if existing.name == entry.name:
                if not replaced:
                    assets.append(entry)
                    replaced = True
                continue
            assets.append(existing)
        if not replaced:
            assets.append(entry)
        return replace(self, assets=tuple(assets))

    def with_entry(self, entry: LockedAsset) -> "LockFile":
        """Replace the entry with the same name and version, or append it."""
        assets = [
            entry if (e.name, e.version) == (entry.name, entry.version) else e
            for e in self.assets
        ]
        if entry not in assets:
            assets.append(entry)
        return replace(self, assets=tuple(assets))

    def without(self, name: str, version: str | None = None) -> "LockFile":
        remaining = tuple(
            entry
            for entry in self.assets
            if not (entry.name == name and (version is None or entry.version == version))
        )
        return replace(self, assets=remaining)

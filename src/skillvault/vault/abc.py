"""Abstract interface for vault storage backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from skillvault.core.assets import Asset


@dataclass(frozen=True)
class LockFileResponse:
    """Result of fetching the lock file.

    When not_modified is True the caller's cached copy is current and data is empty.
    """

    data: bytes
    etag: str | None
    not_modified: bool


class Vault(ABC):
    """Read/write contract of the store that holds asset payloads and the lock file.

    All implementations (path-backed, fake) must implement this interface.
    """

    @property
    @abstractmethod
    def vault_id(self) -> str:
        """Stable identifier used to key local caches for this vault."""
        ...

    @abstractmethod
    def get_version_list(self, name: str) -> list[str]:
        """List stored versions of an asset, oldest first. Empty if unknown."""
        ...

    @abstractmethod
    def get_asset_by_version(self, name: str, version: str) -> bytes:
        """Return the zipped payload of one asset version.

        Raises:
            AssetNotFoundError: If the version does not exist
            VaultError: If the payload cannot be read
        """
        ...

    @abstractmethod
    def add_asset(self, asset: Asset, payload: bytes) -> str:
        """Store a new asset version and return its source path inside the vault.

        Raises:
            VaultError: If the version already exists or cannot be written
        """
        ...

    @abstractmethod
    def remove_asset(self, name: str, version: str) -> None:
        """Delete a stored asset version."""
        ...

    @abstractmethod
    def get_lock_file(self, etag: str | None) -> LockFileResponse:
        """Fetch the lock file, honoring a previously seen ETag."""
        ...

    @abstractmethod
    def save_lock_file(self, data: bytes) -> None:
        """Replace the lock file in a single write."""
        ...

"""Fake vault for testing."""

import hashlib

from skillvault.core.assets import Asset
from skillvault.core.errors import AssetNotFoundError, VaultError
from skillvault.vault.abc import LockFileResponse, Vault


class FakeVault(Vault):
    """In-memory fake vault.

    State Management:
    - payloads: dict[tuple[str, str], bytes] - (name, version) -> zipped payload
    - lock_data: bytes | None - current lock file contents
    - fetch_errors: dict[tuple[str, str], Exception] - raised by get_asset_by_version

    Mutation Tracking:
    - added_assets: list[Asset]
    - removed_assets: list[tuple[str, str]]
    - saved_lock_files: list[bytes]
    - fetched: list[tuple[str, str]]
    """

    def __init__(
        self,
        *,
        payloads: dict[tuple[str, str], bytes] | None = None,
        lock_data: bytes | None = None,
        fetch_errors: dict[tuple[str, str], Exception] | None = None,
    ) -> None:
        self._payloads = dict(payloads or {})
        self._lock_data = lock_data
        self._fetch_errors = fetch_errors or {}

        self._added_assets: list[Asset] = []
        self._removed_assets: list[tuple[str, str]] = []
        self._saved_lock_files: list[bytes] = []
        self._fetched: list[tuple[str, str]] = []

    @property
    def vault_id(self) -> str:
        return "fake"

    def get_version_list(self, name: str) -> list[str]:
        return [version for (n, version) in self._payloads if n == name]

    def get_asset_by_version(self, name: str, version: str) -> bytes:
        self._fetched.append((name, version))
        error = self._fetch_errors.get((name, version))
        if error is not None:
            raise error
        if (name, version) not in self._payloads:
            raise AssetNotFoundError(name, version)
        return self._payloads[(name, version)]

    def add_asset(self, asset: Asset, payload: bytes) -> str:
        if (asset.name, asset.version) in self._payloads:
            raise VaultError(f"Asset {asset.key} already exists in vault")
        self._payloads[(asset.name, asset.version)] = payload
        self._added_assets.append(asset)
        return f"assets/{asset.name}/{asset.version}"

    def remove_asset(self, name: str, version: str) -> None:
        if (name, version) not in self._payloads:
            raise AssetNotFoundError(name, version)
        del self._payloads[(name, version)]
        self._removed_assets.append((name, version))

    def get_lock_file(self, etag: str | None) -> LockFileResponse:
        if self._lock_data is None:
            return LockFileResponse(data=b"", etag=None, not_modified=False)
        current_etag = hashlib.sha256(self._lock_data).hexdigest()
        if etag == current_etag:
            return LockFileResponse(data=b"", etag=current_etag, not_modified=True)
        return LockFileResponse(data=self._lock_data, etag=current_etag, not_modified=False)

    def save_lock_file(self, data: bytes) -> None:
        self._lock_data = data
        self._saved_lock_files.append(data)

    @property
    def lock_data(self) -> bytes | None:
        return self._lock_data

    # Read-only properties for test assertions
    @property
    def added_assets(self) -> list[Asset]:
        return self._added_assets.copy()

    @property
    def removed_assets(self) -> list[tuple[str, str]]:
        return self._removed_assets.copy()

    @property
    def saved_lock_files(self) -> list[bytes]:
        return self._saved_lock_files.copy()

    @property
    def fetched(self) -> list[tuple[str, str]]:
        return self._fetched.copy()

"""Vault backed by a local (or network-mounted) directory.

Layout:

    <root>/
        skillvault.lock
        assets/
            <name>/
                list.txt          # one version per line
                <version>/        # exploded payload
"""

import hashlib
import logging
import os
import shutil
from pathlib import Path

from skillvault.core.assets import Asset
from skillvault.core.errors import AssetNotFoundError, VaultError
from skillvault.core.payload import AssetPayload, InvalidPayloadError, pack_directory
from skillvault.lockfile.models import LOCK_FILE_NAME
from skillvault.vault.abc import LockFileResponse, Vault

logger = logging.getLogger(__name__)

VERSION_LIST_FILENAME = "list.txt"


def _parse_version_list(content: str) -> list[str]:
    return [line.strip() for line in content.splitlines() if line.strip()]


class PathVault(Vault):
    """Directory-backed vault."""

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    @property
    def vault_id(self) -> str:
        return f"path:{self._root.resolve()}"

    def _asset_dir(self, name: str) -> Path:
        return self._root / "assets" / name

    def get_version_list(self, name: str) -> list[str]:
        list_path = self._asset_dir(name) / VERSION_LIST_FILENAME
        if not list_path.exists():
            return []
        return _parse_version_list(list_path.read_text(encoding="utf-8"))

    def get_asset_by_version(self, name: str, version: str) -> bytes:
        version_dir = self._asset_dir(name) / version
        if not version_dir.is_dir():
            raise AssetNotFoundError(name, version)
        try:
            return pack_directory(version_dir)
        except OSError as e:
            raise VaultError(f"Failed to read {name}@{version}: {e}") from e

    def add_asset(self, asset: Asset, payload: bytes) -> str:
        version_dir = self._asset_dir(asset.name) / asset.version
        if version_dir.exists():
            raise VaultError(f"Asset {asset.key} already exists in vault")

        try:
            AssetPayload(payload).extract_to(version_dir)
        except (InvalidPayloadError, OSError) as e:
            shutil.rmtree(version_dir, ignore_errors=True)
            raise VaultError(f"Failed to store {asset.key}: {e}") from e

        versions = self.get_version_list(asset.name)
        if asset.version not in versions:
            versions.append(asset.version)
        self._write_version_list(asset.name, versions)
        logger.debug("Stored %s at %s", asset.key, version_dir)
        return f"assets/{asset.name}/{asset.version}"

    def remove_asset(self, name: str, version: str) -> None:
        version_dir = self._asset_dir(name) / version
        if not version_dir.exists():
            raise AssetNotFoundError(name, version)
        shutil.rmtree(version_dir)

        versions = [v for v in self.get_version_list(name) if v != version]
        if versions:
            self._write_version_list(name, versions)
            return
        list_path = self._asset_dir(name) / VERSION_LIST_FILENAME
        if list_path.exists():
            list_path.unlink()
        if not any(self._asset_dir(name).iterdir()):
            self._asset_dir(name).rmdir()

    def _write_version_list(self, name: str, versions: list[str]) -> None:
        list_path = self._asset_dir(name) / VERSION_LIST_FILENAME
        list_path.parent.mkdir(parents=True, exist_ok=True)
        list_path.write_text("\n".join(versions) + "\n", encoding="utf-8")

    def get_lock_file(self, etag: str | None) -> LockFileResponse:
        lock_path = self._root / LOCK_FILE_NAME
        if not lock_path.exists():
            return LockFileResponse(data=b"", etag=None, not_modified=False)
        data = lock_path.read_bytes()
        current_etag = hashlib.sha256(data).hexdigest()
        if etag is not None and etag == current_etag:
            return LockFileResponse(data=b"", etag=current_etag, not_modified=True)
        return LockFileResponse(data=data, etag=current_etag, not_modified=False)

    def save_lock_file(self, data: bytes) -> None:
        lock_path = self._root / LOCK_FILE_NAME
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = lock_path.with_name(f".{LOCK_FILE_NAME}.tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, lock_path)

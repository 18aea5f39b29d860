"""On-disk caches for lock files and downloaded asset payloads."""

import hashlib
import logging
import os
from pathlib import Path

from skillvault.core.assets import Asset

logger = logging.getLogger(__name__)


def _cache_key(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


class LockFileCache:
    """Caches the last fetched lock file and its ETag, per vault."""

    def __init__(self, cache_dir: Path, vault_id: str) -> None:
        base = cache_dir / "lockfiles" / _cache_key(vault_id)
        self._lock_path = base.with_suffix(".lock")
        self._etag_path = base.with_suffix(".etag")

    def load_etag(self) -> str | None:
        if not self._etag_path.exists() or not self._lock_path.exists():
            return None
        etag = self._etag_path.read_text(encoding="utf-8").strip()
        return etag or None

    def load_lock_file(self) -> bytes | None:
        if not self._lock_path.exists():
            return None
        return self._lock_path.read_bytes()

    def save(self, data: bytes, etag: str | None) -> None:
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock_path.write_bytes(data)
        if etag:
            self._etag_path.write_text(etag, encoding="utf-8")
        elif self._etag_path.exists():
            self._etag_path.unlink()


class AssetCache:
    """Caches downloaded payloads by asset name and version.

    Stored versions are immutable, so a cached payload never goes stale.
    """

    def __init__(self, cache_dir: Path) -> None:
        self._root = cache_dir / "assets"

    def _path_for(self, asset: Asset) -> Path:
        return self._root / asset.name / f"{asset.version}.zip"

    def load(self, asset: Asset) -> bytes | None:
        path = self._path_for(asset)
        if not path.exists():
            return None
        logger.debug("Cache hit for %s", asset.key)
        return path.read_bytes()

    def save(self, asset: Asset, data: bytes) -> None:
        """Store data for asset; readers never observe a partially written payload."""
        path = self._path_for(asset)
        tmp_path = path.with_suffix(".zip.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            logger.warning("Could not cache %s: %s", asset.key, e)

    def discard(self, asset: Asset) -> None:
        self._path_for(asset).unlink(missing_ok=True)

"""JSON-file tracker store kept in the skillvault cache directory."""

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from skillvault.core.assets import ASSET_TYPES
from skillvault.core.scope import TargetBase
from skillvault.tracker.abc import TrackerStore
from skillvault.tracker.models import TRACKER_VERSION, TrackedAsset, Tracker

logger = logging.getLogger(__name__)


def tracker_key(base: TargetBase) -> str:
    if base.repo_root is None:
        return "global"
    return hashlib.sha256(str(base.repo_root).encode("utf-8")).hexdigest()[:16]


class RealTrackerStore(TrackerStore):
    """Stores trackers as <cache_dir>/trackers/<key>.json."""

    def __init__(self, cache_dir: Path) -> None:
        self._dir = cache_dir / "trackers"

    def path_for(self, base: TargetBase) -> Path:
        return self._dir / f"{tracker_key(base)}.json"

    def load(self, base: TargetBase) -> Tracker:
        path = self.path_for(base)
        if not path.exists():
            return Tracker.empty(base)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            assets = tuple(_parse_entry(raw) for raw in data.get("assets", []))
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(
                "Tracker %s is unreadable (%s); treating %s as having nothing installed",
                path,
                e,
                base.describe(),
            )
            return Tracker.empty(base)
        return Tracker(base=base, assets=assets)

    def save(self, tracker: Tracker) -> None:
        path = self.path_for(tracker.base)
        if tracker.is_empty:
            if path.exists():
                path.unlink()
                logger.debug("Deleted empty tracker %s", path)
            return

        data: dict[str, Any] = {
            "version": TRACKER_VERSION,
            "target": tracker.base.describe(),
            "assets": [
                {
                    "name": entry.name,
                    "version": entry.version,
                    "type": entry.type,
                    "path": entry.path,
                    "clients": list(entry.clients),
                }
                for entry in tracker.assets
            ],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, path)


def _parse_entry(raw: dict[str, Any]) -> TrackedAsset:
    asset_type = raw["type"]
    if asset_type not in ASSET_TYPES:
        raise ValueError(f"unknown asset type '{asset_type}'")
    clients = raw["clients"]
    if not isinstance(clients, list):
        raise TypeError("clients must be a list")
    return TrackedAsset(
        name=str(raw["name"]),
        version=str(raw["version"]),
        type=asset_type,
        path=str(raw.get("path", "")),
        clients=tuple(str(c) for c in clients),
    )

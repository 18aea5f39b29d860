"""Fake client for reconcile tests."""

from pathlib import Path

from skillvault.clients.base import Client, InstallItem, ItemResult
from skillvault.clients.materialize import AssetLocation
from skillvault.core.assets import ASSET_TYPES, Asset
from skillvault.core.scope import InstallTarget


class FakeClient(Client):
    """In-memory client that records calls instead of writing files.

    State Management:
    - failing_installs: set[str] - asset names whose install fails
    - failing_uninstalls: set[str] - asset names whose uninstall fails
    - materialized: set[tuple[str, str, InstallTarget]] - what is "on disk"

    Mutation Tracking:
    - install_calls: list[tuple[InstallTarget, list[str]]] - target, asset keys
    - uninstall_calls: list[tuple[InstallTarget, list[str]]] - target, asset keys
    - operations: list[str] - "install:<key>" / "uninstall:<key>" in call order
    """

    def __init__(
        self,
        client_id: str,
        *,
        supported_types: frozenset[str] | None = None,
        supports_subpath: bool = True,
        detected: bool = True,
        failing_installs: set[str] | None = None,
        failing_uninstalls: set[str] | None = None,
    ) -> None:
        self._client_id = client_id
        self._supported_types = supported_types or frozenset(ASSET_TYPES)
        self._supports_subpath = supports_subpath
        self._detected = detected
        self._failing_installs = failing_installs or set()
        self._failing_uninstalls = failing_uninstalls or set()
        self._materialized: set[tuple[str, str, InstallTarget]] = set()

        self._install_calls: list[tuple[InstallTarget, list[str]]] = []
        self._uninstall_calls: list[tuple[InstallTarget, list[str]]] = []
        self._operations: list[str] = []

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def display_name(self) -> str:
        return f"Fake {self._client_id}"

    @property
    def supported_types(self) -> frozenset[str]:
        return self._supported_types

    @property
    def supports_subpath_scope(self) -> bool:
        return self._supports_subpath

    def is_detected(self) -> bool:
        return self._detected

    def base_dir(self, target: InstallTarget) -> Path:
        if target.is_global:
            return Path("/fake-home") / f".{self._client_id}"
        assert target.repo_root is not None
        if target.kind == "path":
            return target.repo_root / target.path / f".{self._client_id}"
        return target.repo_root / f".{self._client_id}"

    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        return AssetLocation(kind="file", path=self.base_dir(target) / asset.type / asset.name)

    def is_materialized(self, asset: Asset, target: InstallTarget) -> bool:
        return (asset.name, asset.version, self.physical_target(target)) in self._materialized

    def install(self, items: list[InstallItem], target: InstallTarget) -> list[ItemResult]:
        physical = self.physical_target(target)
        self._install_calls.append((target, [item.asset.key for item in items]))
        results: list[ItemResult] = []
        for item in items:
            self._operations.append(f"install:{item.asset.key}")
            if item.asset.name in self._failing_installs:
                results.append(ItemResult(asset=item.asset, status="failed", error="boom"))
                continue
            self._materialized.add((item.asset.name, item.asset.version, physical))
            results.append(ItemResult(asset=item.asset, status="success"))
        return results

    def uninstall(self, assets: list[Asset], target: InstallTarget) -> list[ItemResult]:
        physical = self.physical_target(target)
        self._uninstall_calls.append((target, [asset.key for asset in assets]))
        results: list[ItemResult] = []
        for asset in assets:
            self._operations.append(f"uninstall:{asset.key}")
            if asset.name in self._failing_uninstalls:
                results.append(ItemResult(asset=asset, status="failed", error="permission denied"))
                continue
            self._materialized.discard((asset.name, asset.version, physical))
            results.append(ItemResult(asset=asset, status="success"))
        return results

    def mark_materialized(self, asset: Asset, target: InstallTarget) -> None:
        self._materialized.add((asset.name, asset.version, self.physical_target(target)))

    @property
    def install_calls(self) -> list[tuple[InstallTarget, list[str]]]:
        return self._install_calls.copy()

    @property
    def uninstall_calls(self) -> list[tuple[InstallTarget, list[str]]]:
        return self._uninstall_calls.copy()

    @property
    def operations(self) -> list[str]:
        return self._operations.copy()

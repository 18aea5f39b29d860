"""Cursor integration."""

from pathlib import Path

from skillvault.clients.base import Client, repo_dir
from skillvault.clients.materialize import AssetLocation
from skillvault.core.assets import MCP_ASSET_TYPES, Asset
from skillvault.core.scope import InstallTarget


class CursorClient(Client):
    """Installs into ~/.cursor and <repo>[/<path>]/.cursor.

    Cursor has no agent concept; agents and plugins are reported as skipped.
    """

    def __init__(self, home: Path) -> None:
        self._home = home

    @property
    def client_id(self) -> str:
        return "cursor"

    @property
    def display_name(self) -> str:
        return "Cursor"

    @property
    def supported_types(self) -> frozenset[str]:
        return frozenset({"mcp", "mcp-remote", "skill", "command", "hook", "rule"})

    def is_detected(self) -> bool:
        return (self._home / ".cursor").is_dir()

    def base_dir(self, target: InstallTarget) -> Path:
        if target.is_global:
            return self._home / ".cursor"
        return repo_dir(target, ".cursor")

    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        base = self.base_dir(target)
        if asset.type in MCP_ASSET_TYPES:
            return AssetLocation(kind="mcp-json", path=base / "mcp.json", key=asset.name)
        if asset.type == "rule":
            # Cursor project rules use the .mdc extension
            return AssetLocation(kind="file", path=base / "rules" / f"{asset.name}.mdc")
        if asset.type == "command":
            return AssetLocation(kind="file", path=base / "commands" / f"{asset.name}.md")
        if asset.type == "hook":
            return AssetLocation(kind="directory", path=base / "hooks" / asset.name)
        return AssetLocation(kind="directory", path=base / "skills" / asset.name)

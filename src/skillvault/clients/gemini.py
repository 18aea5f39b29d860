"""Gemini CLI integration."""

from pathlib import Path

from skillvault.clients.base import Client, repo_dir
from skillvault.clients.materialize import AssetLocation
from skillvault.core.assets import MCP_ASSET_TYPES, Asset
from skillvault.core.scope import InstallTarget


class GeminiClient(Client):
    """Installs into ~/.gemini and <repo>/.gemini.

    Gemini only reads configuration from the repository root, so path-scoped
    assets are installed at the root.
    """

    def __init__(self, home: Path) -> None:
        self._home = home

    @property
    def client_id(self) -> str:
        return "gemini"

    @property
    def display_name(self) -> str:
        return "Gemini CLI"

    @property
    def supported_types(self) -> frozenset[str]:
        return frozenset({"mcp", "mcp-remote", "rule", "skill", "command"})

    @property
    def supports_subpath_scope(self) -> bool:
        return False

    def is_detected(self) -> bool:
        return (self._home / ".gemini").is_dir()

    def base_dir(self, target: InstallTarget) -> Path:
        if target.is_global:
            return self._home / ".gemini"
        return repo_dir(target.at_repo_root(), ".gemini")

    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        base = self.base_dir(target)
        if asset.type in MCP_ASSET_TYPES:
            return AssetLocation(kind="mcp-json", path=base / "settings.json", key=asset.name)
        if asset.type == "skill":
            return AssetLocation(kind="directory", path=base / "skills" / asset.name)
        if asset.type == "command":
            return AssetLocation(kind="file", path=base / "commands" / f"{asset.name}.md")
        return AssetLocation(kind="file", path=base / "rules" / f"{asset.name}.md")

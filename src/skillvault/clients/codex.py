"""OpenAI Codex CLI integration."""

from pathlib import Path

from skillvault.clients.base import Client, repo_dir
from skillvault.clients.materialize import AssetLocation
from skillvault.core.assets import MCP_ASSET_TYPES, Asset
from skillvault.core.scope import InstallTarget


class CodexClient(Client):
    """Installs into ~/.codex and <repo>/.codex.

    Repository skills go to <repo>/.agents/skills, the shared location Codex
    scans. MCP servers are registered in config.toml.
    """

    def __init__(self, home: Path) -> None:
        self._home = home

    @property
    def client_id(self) -> str:
        return "codex"

    @property
    def display_name(self) -> str:
        return "Codex"

    @property
    def supported_types(self) -> frozenset[str]:
        return frozenset({"skill", "command", "mcp", "mcp-remote", "rule"})

    @property
    def supports_subpath_scope(self) -> bool:
        return False

    def is_detected(self) -> bool:
        return (self._home / ".codex").is_dir()

    def base_dir(self, target: InstallTarget) -> Path:
        if target.is_global:
            return self._home / ".codex"
        return repo_dir(target.at_repo_root(), ".codex")

    def location_for(self, asset: Asset, target: InstallTarget) -> AssetLocation:
        base = self.base_dir(target)
        if asset.type in MCP_ASSET_TYPES:
            return AssetLocation(kind="mcp-toml", path=base / "config.toml", key=asset.name)
        if asset.type == "skill":
            if target.is_global:
                return AssetLocation(kind="directory", path=base / "skills" / asset.name)
            skills_dir = base.parent / ".agents" / "skills"
            return AssetLocation(kind="directory", path=skills_dir / asset.name)
        if asset.type == "command":
            return AssetLocation(kind="file", path=base / "prompts" / f"{asset.name}.md")
        return AssetLocation(kind="file", path=base / "rules" / f"{asset.name}.md")

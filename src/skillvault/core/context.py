"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from skillvault.clients.registry import ClientRegistry
from skillvault.core.cache import AssetCache, LockFileCache
from skillvault.core.config import SkillvaultConfig, get_cache_dir, get_config_dir, load_config
from skillvault.core.errors import NoVaultConfiguredError
from skillvault.gateway.git.abc import Git
from skillvault.gateway.git.real import RealGit
from skillvault.tracker.abc import TrackerStore
from skillvault.tracker.real import RealTrackerStore
from skillvault.vault.abc import Vault
from skillvault.vault.factory import create_vault


@dataclass(frozen=True)
class SkillvaultContext:
    """Immutable context holding all dependencies for skillvault operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    vault is None until one is configured with `skillvault init`.
    """

    git: Git
    vault: Vault | None
    tracker_store: TrackerStore
    registry: ClientRegistry
    config: SkillvaultConfig
    config_dir: Path
    cwd: Path
    home: Path
    asset_cache: AssetCache | None
    lock_cache: LockFileCache | None

    def require_vault(self) -> Vault:
        if self.vault is None:
            raise NoVaultConfiguredError()
        return self.vault

    @staticmethod
    def for_test(
        *,
        git: Git | None = None,
        vault: Vault | None = None,
        tracker_store: TrackerStore | None = None,
        registry: ClientRegistry | None = None,
        config: SkillvaultConfig | None = None,
        config_dir: Path | None = None,
        cwd: Path | None = None,
        home: Path | None = None,
    ) -> "SkillvaultContext":
        """Create a context with fakes for every dependency not supplied."""
        from skillvault.gateway.git.fake import FakeGit
        from skillvault.tracker.fake import FakeTrackerStore
        from skillvault.vault.fake import FakeVault

        return SkillvaultContext(
            git=git if git is not None else FakeGit(),
            vault=vault if vault is not None else FakeVault(),
            tracker_store=tracker_store if tracker_store is not None else FakeTrackerStore(),
            registry=registry if registry is not None else ClientRegistry(()),
            config=config if config is not None else SkillvaultConfig.default(),
            config_dir=config_dir if config_dir is not None else Path("/test/config"),
            cwd=cwd if cwd is not None else Path("/test/cwd"),
            home=home if home is not None else Path("/test/home"),
            asset_cache=None,
            lock_cache=None,
        )


def create_context() -> SkillvaultContext:
    """Create the production context.

    Raises:
        ConfigurationError: If the config file is invalid
    """
    config_dir = get_config_dir()
    cache_dir = get_cache_dir()
    config = load_config(config_dir)
    home = Path.home()

    vault: Vault | None = None
    if config.vault_type is not None:
        vault = create_vault(config)

    return SkillvaultContext(
        git=RealGit(),
        vault=vault,
        tracker_store=RealTrackerStore(cache_dir),
        registry=ClientRegistry.default(home),
        config=config,
        config_dir=config_dir,
        cwd=Path.cwd(),
        home=home,
        asset_cache=AssetCache(cache_dir),
        lock_cache=LockFileCache(cache_dir, vault.vault_id) if vault is not None else None,
    )

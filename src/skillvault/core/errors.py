"""Exception taxonomy for skillvault operations."""


class SkillvaultError(Exception):
    """Base class for all skillvault errors."""


class ConfigurationError(SkillvaultError):
    """Invalid or missing configuration. Raised before any mutation happens."""


class NoVaultConfiguredError(ConfigurationError):
    """No vault has been configured for this machine."""

    def __init__(self) -> None:
        super().__init__("No vault configured. Run 'skillvault init --vault <dir>' first.")


class InvalidScopeError(ConfigurationError):
    """A scope declaration is malformed."""


class UnknownClientError(ConfigurationError):
    """A client id does not match any registered client."""

    def __init__(self, client_id: str, known: list[str]) -> None:
        self.client_id = client_id
        super().__init__(f"Unknown client '{client_id}'. Known clients: {', '.join(known)}")


class LockFileError(SkillvaultError):
    """The lock file could not be parsed or failed validation."""


class VaultError(SkillvaultError):
    """A vault read or write failed."""


class AssetNotFoundError(VaultError):
    """The requested asset version does not exist in the vault."""

    def __init__(self, name: str, version: str) -> None:
        self.name = name
        self.version = version
        super().__init__(f"Asset {name}@{version} not found in vault")


class FetchError(SkillvaultError):
    """Every requested asset failed to download."""


class DeadlineExceededError(SkillvaultError):
    """The run deadline passed before the operation completed."""


class AssetNotInLockError(SkillvaultError):
    """The named asset has no entry in the lock file."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Asset '{name}' is not in the lock file")

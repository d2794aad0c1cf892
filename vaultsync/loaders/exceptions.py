"""Custom exceptions for configuration loaders."""

from vaultsync.core.exceptions import VaultSyncError


class ConfigurationError(VaultSyncError):
    """Raised when the configuration tree cannot be loaded or parsed."""
    pass


class UnsupportedFormatError(ConfigurationError):
    """Raised for a recognized structured format that is not implemented (YAML)."""
    pass

"""Core module - settings, shared errors and secret substitution."""
from vaultsync.core.exceptions import SettingsError, VaultSyncError
from vaultsync.core.config import Config, Settings

__all__ = ["Config", "Settings", "SettingsError", "VaultSyncError"]

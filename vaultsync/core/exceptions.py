"""Base exception shared by every vaultsync subpackage."""


class VaultSyncError(Exception):
    """Root of all errors raised by vaultsync.

    Anything deriving from this is a fatal condition for the current run;
    the CLI turns it into a non-zero exit.
    """
    pass


class SettingsError(VaultSyncError):
    """Raised when runtime settings are invalid."""
    pass

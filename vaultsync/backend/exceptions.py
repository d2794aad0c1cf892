"""Custom exceptions for the backend client layer."""

from vaultsync.core.exceptions import VaultSyncError


class BackendError(VaultSyncError):
    """Raised when a backend call fails."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class MountNotFoundError(BackendError):
    """Raised when no mount owns the requested path."""
    pass


class NotAKvMountError(BackendError):
    """Raised when a path's mount is not a key-value store."""
    pass

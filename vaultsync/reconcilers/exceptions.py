"""Custom exceptions for reconcilers."""

from vaultsync.core.exceptions import VaultSyncError


class MountTypeMismatchError(VaultSyncError):
    """Raised when a declared mount path is live with a different type."""

    def __init__(self, path: str, live_type: str, declared_type: str):
        self.path = path
        self.live_type = live_type
        self.declared_type = declared_type
        super().__init__(
            f"Mount path {path} exists but doesn't match type: "
            f"{live_type} != {declared_type}"
        )

"""Custom exceptions for task execution."""

from vaultsync.core.exceptions import VaultSyncError


class TaskExecutionError(VaultSyncError):
    """Raised when a write or delete task fails."""

    def __init__(self, task, cause: Exception):
        self.task = task
        self.cause = cause
        super().__init__(f"{task.description} failed at [{task.path}]: {cause}")

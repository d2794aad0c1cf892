"""Task execution - concurrent writes and confirmation-gated deletes."""
from vaultsync.tasks.exceptions import TaskExecutionError
from vaultsync.tasks.models import DeleteTask, WriteTask
from vaultsync.tasks.pool import WritePool
from vaultsync.tasks.review import DeleteReviewQueue, ReviewResult, ask_for_confirmation

__all__ = [
    "TaskExecutionError",
    "DeleteTask",
    "WriteTask",
    "WritePool",
    "DeleteReviewQueue",
    "ReviewResult",
    "ask_for_confirmation",
]

"""Sequential, confirmation-gated deletion queue."""

import functools
import logging
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TextIO

from vaultsync.backend.base import BaseBackendClient
from vaultsync.tasks.exceptions import TaskExecutionError
from vaultsync.tasks.models import DeleteTask

logger = logging.getLogger(__name__)


def ask_for_confirmation(
    message: str,
    max_attempts: int = 3,
    input_func: Callable[[str], str] = input,
    output: Optional[TextIO] = None,
) -> bool:
    """
    Ask a yes/no question.

    Only the first character of the answer counts, case-insensitively.
    Anything other than y/n (including empty input or EOF) uses up one
    attempt; when attempts run out the answer is "no".

    Returns:
        True for yes, False for no
    """
    output = output or sys.stdout
    for _ in range(max_attempts):
        try:
            response = input_func(message)
        except EOFError:
            response = ""

        answer = response.strip()[:1].lower()
        if answer == "y":
            return True
        if answer == "n":
            return False
        print("Invalid response.", file=output)

    logger.warning("Max number of invalid confirmations reached, exiting with 'n' response")
    return False


@dataclass
class ReviewResult:
    deleted: List[str] = field(default_factory=list)
    declined: List[str] = field(default_factory=list)


class DeleteReviewQueue:
    """
    Holds DeleteTasks until the operator reviews them one at a time.

    Usage:
        review = DeleteReviewQueue(client)
        review.put(DeleteTask("sys/auth/old/", "Auth method [sys/auth/old]"))
        result = review.process()
    """

    def __init__(
        self,
        client: BaseBackendClient,
        confirm: Optional[Callable[[str], bool]] = None,
        max_attempts: int = 3,
        assume_no: bool = False,
    ):
        """
        Args:
            client: Backend deletions go to
            confirm: Yes/no callback; defaults to an interactive prompt
            max_attempts: Invalid answers tolerated per prompt
            assume_no: Decline everything without asking
        """
        self.client = client
        self.confirm = confirm or functools.partial(
            ask_for_confirmation, max_attempts=max_attempts
        )
        self.assume_no = assume_no
        self._tasks: List[DeleteTask] = []

    def put(self, task: DeleteTask) -> None:
        logger.debug(f"[{task.path}] does not exist in configuration, queued for review")
        self._tasks.append(task)

    @property
    def pending(self) -> List[DeleteTask]:
        return list(self._tasks)

    def process(self) -> ReviewResult:
        """
        Review queued deletions in order.

        Raises:
            TaskExecutionError: If a confirmed deletion fails
        """
        result = ReviewResult()
        while self._tasks:
            task = self._tasks.pop(0)
            if self._approved(task):
                try:
                    self.client.delete(task.path)
                except Exception as e:
                    raise TaskExecutionError(task, e) from e
                logger.info(f"[{task.path}] deleted")
                result.deleted.append(task.path)
            else:
                logger.info(f"Leaving [{task.path}] even though it is not in configuration")
                result.declined.append(task.path)
        return result

    def _approved(self, task: DeleteTask) -> bool:
        if self.assume_no:
            return False
        return self.confirm(
            f"{task.description} does not exist in configuration. Delete [y/n]?: "
        )

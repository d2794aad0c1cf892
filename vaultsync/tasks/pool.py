"""Bounded worker pool for write tasks.

Writes are idempotent upserts against disjoint paths, so they run in any
order. The pool doubles as the apply/cleanup barrier: wait() returns only
once every submitted write has finished, which is what keeps a resource
whose write is still in flight from being mistaken for an orphan.
"""

import logging
import queue
import threading
from typing import List, Optional

from vaultsync.backend.base import BaseBackendClient
from vaultsync.tasks.exceptions import TaskExecutionError
from vaultsync.tasks.models import WriteTask

logger = logging.getLogger(__name__)

_STOP = object()


class WritePool:
    """
    Fixed-size pool of worker threads executing WriteTasks.

    The first failure is kept; tasks still queued behind it are drained
    without running, new submissions are refused, and wait() raises it.

    Usage:
        with WritePool(client, workers=5) as pool:
            pool.submit(WriteTask("auth/github/config", "GitHub config", {...}))
            pool.wait()
    """

    def __init__(self, client: BaseBackendClient, workers: int = 5):
        """
        Args:
            client: Backend the writes go to
            workers: Number of worker threads
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.client = client
        self.workers = workers
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._error: Optional[TaskExecutionError] = None
        self._submitted = 0
        self._finished = 0
        self._succeeded = 0

    def __enter__(self) -> "WritePool":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start worker threads (idempotent)."""
        if self._threads:
            return
        for i in range(self.workers):
            thread = threading.Thread(
                target=self._worker, name=f"vaultsync-writer-{i}", daemon=True
            )
            thread.start()
            self._threads.append(thread)
        logger.debug(f"Started {self.workers} write workers")

    def close(self) -> None:
        """Stop workers once queued work is done."""
        for _ in self._threads:
            self._queue.put(_STOP)
        for thread in self._threads:
            thread.join()
        self._threads = []

    @property
    def pending(self) -> int:
        """Writes submitted but not yet finished."""
        with self._lock:
            return self._submitted - self._finished

    @property
    def succeeded(self) -> int:
        with self._lock:
            return self._succeeded

    @property
    def failed(self) -> bool:
        with self._lock:
            return self._error is not None

    def submit(self, task: WriteTask) -> None:
        """
        Enqueue a write.

        Raises:
            TaskExecutionError: If an earlier write already failed
        """
        with self._lock:
            if self._error is not None:
                raise self._error
            self._submitted += 1
        self.start()
        logger.debug(f"Queued: {task.description}")
        self._queue.put(task)

    def wait(self) -> None:
        """
        Block until every submitted write has finished.

        Raises:
            TaskExecutionError: The first write failure, if any
        """
        self._queue.join()
        with self._lock:
            error = self._error
        if error is not None:
            raise error

    def _worker(self) -> None:
        while True:
            task = self._queue.get()
            if task is _STOP:
                self._queue.task_done()
                return
            try:
                self._execute(task)
            finally:
                with self._lock:
                    self._finished += 1
                self._queue.task_done()

    def _execute(self, task: WriteTask) -> None:
        if self.failed:
            logger.debug(f"Skipping after earlier failure: {task.description}")
            return
        try:
            self.client.write(task.path, task.data)
        except Exception as e:
            error = TaskExecutionError(task, e)
            with self._lock:
                if self._error is None:
                    self._error = error
            logger.error(str(error))
            return
        with self._lock:
            self._succeeded += 1
        logger.info(f"Wrote {task.description}")

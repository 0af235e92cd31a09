"""Closable FIFO channel connecting task submission to the workers.

There is a single producer (the pool) and many consumers (the workers).
Closing the queue is the end-of-stream signal: consumers keep receiving the
tasks that were enqueued before the close, and are told the queue is closed
once it runs dry.
"""

import threading
from collections import deque
from collections.abc import Callable

from workpool.core.errors import QueueClosedError

Task = Callable[[], object]


class TaskQueue:
    """Unbounded task queue with an explicit close operation.

    All state is guarded by one condition lock. ``get`` holds the lock only
    while waiting for and removing a task, never while the task runs.
    """

    def __init__(self):
        self._tasks: deque[Task] = deque()
        self._cond = threading.Condition(threading.Lock())
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._tasks)

    def put(self, task: Task) -> None:
        """Append a task and wake up one waiting consumer.

        Raises:
            QueueClosedError: If the queue has been closed
        """
        with self._cond:
            if self._closed:
                raise QueueClosedError("Cannot put a task on a closed queue")
            self._tasks.append(task)
            self._cond.notify()

    def get(self) -> Task:
        """Remove and return the oldest task, blocking while none is available.

        Raises:
            QueueClosedError: If the queue is closed and empty
        """
        with self._cond:
            while not self._tasks and not self._closed:
                self._cond.wait()
            if self._tasks:
                return self._tasks.popleft()
            raise QueueClosedError("Task queue is closed and drained")

    def close(self) -> None:
        """Close the queue and wake up every waiting consumer.

        Tasks already in the queue are still handed out by ``get``.
        Closing twice is harmless.
        """
        with self._cond:
            self._closed = True
            self._cond.notify_all()

"""Worker threads that execute tasks from the shared queue."""

import logging
import threading

from workpool.core.errors import QueueClosedError
from workpool.core.events import PoolEventListener, PoolEventType
from workpool.core.task_queue import TaskQueue

logger = logging.getLogger(__name__)


class Worker:
    """A long-lived thread that pulls tasks from a queue and runs them.

    The thread is started by the constructor and runs until the queue is
    closed and drained. Exceptions raised by a task are not caught: they end
    the worker's thread and are reported by ``threading.excepthook``.

    The thread handle can be taken exactly once, by ``join()``. After that,
    ``thread`` is None and further joins are no-ops.
    """

    def __init__(
        self,
        worker_id: int,
        task_queue: TaskQueue,
        listener: PoolEventListener | None = None,
        thread_name_prefix: str = "workpool-worker",
    ):
        """Create the worker and start its thread.

        Args:
            worker_id: Index of the worker within its pool (0..n-1)
            task_queue: Shared queue the worker takes tasks from
            listener: Receives the worker's lifecycle and task events
            thread_name_prefix: Prefix for the thread name; the id is appended
        """
        self.worker_id = worker_id
        self.task_queue = task_queue
        self.listener = listener or PoolEventListener()
        self.name = f"{thread_name_prefix}-{worker_id}"
        self.tasks_completed = 0
        # Daemon threads do not hold up interpreter exit before the pool's
        # exit-time finalizer has closed the queue and joined them.
        self._thread: threading.Thread | None = threading.Thread(
            target=self._run, name=self.name, daemon=True
        )
        self._thread.start()

    @property
    def thread(self) -> threading.Thread | None:
        """The worker's thread, or None once it has been joined."""
        return self._thread

    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def _run(self):
        self.listener.emit(
            PoolEventType.WORKER_STARTED, f"Worker {self.worker_id} started", self.worker_id
        )
        while True:
            try:
                task = self.task_queue.get()
            except QueueClosedError:
                break

            self.listener.emit(
                PoolEventType.TASK_RECEIVED,
                f"Worker {self.worker_id} got a task; executing.",
                self.worker_id,
            )
            task()
            self.tasks_completed += 1

        self.listener.emit(
            PoolEventType.WORKER_STOPPED,
            f"Worker {self.worker_id} disconnected; shutting down.",
            self.worker_id,
        )

    def join(self) -> bool:
        """Wait for the worker's thread to terminate.

        Returns:
            True if the thread was joined by this call, False if it had
            already been taken by an earlier join
        """
        thread = self._thread
        if thread is None:
            return False
        if thread is threading.current_thread():
            logger.warning(
                f"Worker {self.worker_id} asked to join itself; "
                f"it will exit after its current task"
            )
            return False
        self._thread = None
        thread.join()
        return True

    def __repr__(self):
        state = "alive" if self.is_alive() else "stopped"
        return f"Worker(id={self.worker_id}, name={self.name!r}, {state})"

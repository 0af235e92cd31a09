"""Fixed-size thread pool.

The pool owns a set of ``Worker`` threads and the producing side of a shared
``TaskQueue``. Submitting a task puts it on the queue, where the next idle
worker picks it up. Shutting the pool down closes the queue and then joins
every worker in construction order, so that:

- every task submitted before shutdown is executed, and
- no worker thread is left running once shutdown returns.

Shutdown happens exactly once per pool, whichever comes first of an explicit
``shutdown()`` call, leaving a ``with`` block, garbage collection of the pool,
or interpreter exit.
"""

import functools
import logging
import weakref
from collections.abc import Callable
from typing import TYPE_CHECKING

from workpool.core.errors import PoolConfigurationError, PoolShutdownError, QueueClosedError
from workpool.core.events import LoggingEventListener, PoolEventListener, PoolEventType
from workpool.core.task_queue import TaskQueue
from workpool.core.worker import Worker

if TYPE_CHECKING:
    from workpool.infrastructure.config import WorkpoolConfig

logger = logging.getLogger(__name__)

DEFAULT_THREAD_NAME_PREFIX = "workpool-worker"


def _shutdown_workers(
    task_queue: TaskQueue, workers: tuple[Worker, ...], listener: PoolEventListener
) -> None:
    """Close the queue and join all workers.

    This is the pool's finalizer callback. It must not hold a reference to the
    pool itself, otherwise the pool could never be garbage collected.
    """
    # execute() must fail from the moment shutdown begins
    task_queue.close()
    listener.emit(
        PoolEventType.POOL_STOPPING,
        f"Shutting down thread pool with {len(workers)} worker(s)",
    )
    _join_workers(workers, listener)
    listener.emit(PoolEventType.POOL_STOPPED, "Thread pool shut down")


def _join_workers(workers: tuple[Worker, ...], listener: PoolEventListener) -> None:
    for worker in workers:
        logger.debug(f"Shutting down worker {worker.worker_id}")
        if worker.join():
            listener.emit(
                PoolEventType.WORKER_JOINED,
                f"Worker {worker.worker_id} joined after {worker.tasks_completed} task(s)",
                worker.worker_id,
            )


class ThreadPool:
    """A fixed number of worker threads executing submitted tasks.

    Example:
        with ThreadPool(4) as pool:
            for path in paths:
                pool.execute(process_file, path)
        # All tasks have run and all worker threads have exited here.
    """

    def __init__(
        self,
        count: int,
        *,
        thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX,
        listener: PoolEventListener | None = None,
    ):
        """Create the pool and start its workers.

        Args:
            count: Number of worker threads; must be a positive integer
            thread_name_prefix: Prefix for worker thread names
            listener: Receives pool and worker events. Defaults to a
                ``LoggingEventListener``.

        Raises:
            PoolConfigurationError: If count is not a positive integer
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise PoolConfigurationError(
                f"Thread pool size must be a positive integer, got {count!r}"
            )

        self.listener = listener if listener is not None else LoggingEventListener()
        self.listener.emit(
            PoolEventType.POOL_STARTING, f"Starting thread pool with {count} worker(s)"
        )

        self._task_queue = TaskQueue()
        started: list[Worker] = []
        try:
            for worker_id in range(count):
                started.append(
                    Worker(
                        worker_id,
                        self._task_queue,
                        listener=self.listener,
                        thread_name_prefix=thread_name_prefix,
                    )
                )
        except BaseException:
            logger.error(
                f"Could not start worker {len(started)} of {count}; "
                f"stopping the {len(started)} worker(s) already running"
            )
            self._task_queue.close()
            _join_workers(tuple(started), self.listener)
            raise
        self._workers = tuple(started)
        self._finalizer = weakref.finalize(
            self, _shutdown_workers, self._task_queue, self._workers, self.listener
        )

        self.listener.emit(
            PoolEventType.POOL_STARTED, f"Thread pool started with {count} worker(s)"
        )

    @classmethod
    def from_config(
        cls,
        config: "WorkpoolConfig | None" = None,
        listener: PoolEventListener | None = None,
    ) -> "ThreadPool":
        """Create a pool sized and named according to the configuration.

        Args:
            config: Configuration to use; defaults to the global configuration
            listener: Event listener; defaults to a ``LoggingEventListener``
                honouring ``logging.log_task_events``

        Returns:
            A running ThreadPool
        """
        # Import here to avoid a circular dependency
        from workpool.infrastructure.config import get_config

        config = config or get_config()
        if listener is None:
            listener = LoggingEventListener(log_task_events=config.logging.log_task_events)

        return cls(
            config.pool.default_worker_count,
            thread_name_prefix=config.pool.thread_name_prefix,
            listener=listener,
        )

    @property
    def size(self) -> int:
        return len(self._workers)

    @property
    def workers(self) -> tuple[Worker, ...]:
        return self._workers

    @property
    def is_shutdown(self) -> bool:
        """True once shutdown has begun and no more tasks are accepted."""
        return self._task_queue.closed

    @property
    def pending_tasks(self) -> int:
        """Number of submitted tasks that no worker has picked up yet."""
        return len(self._task_queue)

    def live_worker_count(self) -> int:
        return sum(1 for worker in self._workers if worker.is_alive())

    def execute(self, task: Callable[..., object], *args, **kwargs) -> None:
        """Submit a task for execution on one of the workers.

        Positional and keyword arguments are bound to the task, which is then
        called exactly once by exactly one worker. This call does not wait for
        the task to run.

        Args:
            task: The callable to run
            *args: Positional arguments for the task
            **kwargs: Keyword arguments for the task

        Raises:
            TypeError: If task is not callable
            PoolShutdownError: If the pool has started shutting down
        """
        if not callable(task):
            raise TypeError(f"Task must be callable, got {type(task).__name__}")
        if args or kwargs:
            task = functools.partial(task, *args, **kwargs)

        try:
            self._task_queue.put(task)
        except QueueClosedError as err:
            raise PoolShutdownError("Cannot submit a task to a pool that is shut down") from err

    def shutdown(self) -> None:
        """Stop accepting tasks, run all queued tasks and join every worker.

        Blocks until all workers have exited. Calling it more than once is a
        no-op. When called from one of the pool's own workers, that worker is
        not joined; it exits once its current task returns.
        """
        self._finalizer()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()
        return False

    def __len__(self) -> int:
        return self.size

    def __repr__(self):
        state = "shut down" if self.is_shutdown else "running"
        return f"ThreadPool(size={self.size}, pending={self.pending_tasks}, {state})"

"""workpool - A fixed-size thread pool with leak-free shutdown.

Tasks submitted to a ThreadPool are executed by a fixed set of worker
threads. Shutting the pool down runs every task that was already submitted
and joins every worker thread before returning.
"""

from workpool.__version__ import __version__

# Convenience imports for common classes
from workpool.core.errors import (
    PoolConfigurationError,
    PoolShutdownError,
    QueueClosedError,
    WorkpoolError,
)
from workpool.core.events import LoggingEventListener, PoolEvent, PoolEventListener, PoolEventType
from workpool.core.pool import ThreadPool
from workpool.core.task_queue import TaskQueue
from workpool.core.worker import Worker

__all__ = [
    "__version__",
    "ThreadPool",
    "Worker",
    "TaskQueue",
    "PoolEvent",
    "PoolEventType",
    "PoolEventListener",
    "LoggingEventListener",
    "WorkpoolError",
    "PoolConfigurationError",
    "PoolShutdownError",
    "QueueClosedError",
]

"""Core worker pool: task queue, workers and the pool itself."""

from workpool.core.errors import (
    PoolConfigurationError,
    PoolShutdownError,
    QueueClosedError,
    WorkpoolError,
)
from workpool.core.events import (
    LoggingEventListener,
    PoolEvent,
    PoolEventListener,
    PoolEventType,
)
from workpool.core.pool import ThreadPool
from workpool.core.task_queue import Task, TaskQueue
from workpool.core.worker import Worker

__all__ = [
    "LoggingEventListener",
    "PoolConfigurationError",
    "PoolEvent",
    "PoolEventListener",
    "PoolEventType",
    "PoolShutdownError",
    "QueueClosedError",
    "Task",
    "TaskQueue",
    "ThreadPool",
    "Worker",
    "WorkpoolError",
]

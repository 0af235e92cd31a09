"""Exceptions raised by the worker pool."""


class WorkpoolError(Exception):
    """Base class for all workpool errors."""


class PoolConfigurationError(WorkpoolError, ValueError):
    """The pool was constructed with an invalid size."""


class PoolShutdownError(WorkpoolError, RuntimeError):
    """A task was submitted after the pool started shutting down."""


class QueueClosedError(WorkpoolError):
    """The task queue is closed.

    Raised by ``TaskQueue.put`` once the queue is closed, and by
    ``TaskQueue.get`` once the queue is closed and no task remains.
    """

"""Pool and worker lifecycle events.

Workers and pools report what they are doing to an injected
``PoolEventListener`` instead of writing to the console. The default
listener forwards everything to the standard logging module.
"""

import logging
from datetime import datetime
from enum import Enum

from attrs import field, frozen


class PoolEventType(Enum):
    """Pool and worker lifecycle event types."""

    POOL_STARTING = "pool_starting"
    POOL_STARTED = "pool_started"
    WORKER_STARTED = "worker_started"
    TASK_RECEIVED = "task_received"
    WORKER_STOPPED = "worker_stopped"
    POOL_STOPPING = "pool_stopping"
    WORKER_JOINED = "worker_joined"
    POOL_STOPPED = "pool_stopped"


@frozen
class PoolEvent:
    """A single pool or worker event, as passed to ``PoolEventListener.on_event``."""

    event_type: PoolEventType
    message: str
    worker_id: int | None = None
    timestamp: datetime = field(factory=datetime.now)


class PoolEventListener:
    """Receives events from a pool and its workers.

    ``on_event`` is called on the thread that produced the event, so
    implementations must be thread-safe. The base class ignores all events.
    """

    def on_event(self, event: PoolEvent) -> None:
        pass

    def emit(self, event_type: PoolEventType, message: str, worker_id: int | None = None):
        self.on_event(PoolEvent(event_type, message, worker_id))


class LoggingEventListener(PoolEventListener):
    """Forward pool events to a logger.

    Task events are frequent, so they are logged at DEBUG unless
    ``log_task_events`` is set.
    """

    _LIFECYCLE_LEVELS = {
        PoolEventType.POOL_STARTING: logging.DEBUG,
        PoolEventType.POOL_STARTED: logging.INFO,
        PoolEventType.WORKER_STARTED: logging.DEBUG,
        PoolEventType.WORKER_STOPPED: logging.DEBUG,
        PoolEventType.POOL_STOPPING: logging.INFO,
        PoolEventType.WORKER_JOINED: logging.DEBUG,
        PoolEventType.POOL_STOPPED: logging.INFO,
    }

    def __init__(self, logger: logging.Logger | None = None, log_task_events: bool = False):
        self.logger = logger or logging.getLogger("workpool.events")
        self.log_task_events = log_task_events

    def on_event(self, event: PoolEvent) -> None:
        if event.event_type is PoolEventType.TASK_RECEIVED:
            level = logging.INFO if self.log_task_events else logging.DEBUG
        else:
            level = self._LIFECYCLE_LEVELS.get(event.event_type, logging.INFO)
        self.logger.log(level, event.message)

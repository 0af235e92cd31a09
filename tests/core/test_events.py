"""Tests for events module."""

import logging
from datetime import datetime

import attrs
import pytest

from workpool.core.events import (
    LoggingEventListener,
    PoolEvent,
    PoolEventListener,
    PoolEventType,
)


def test_pool_event_is_immutable():
    event = PoolEvent(PoolEventType.POOL_STARTED, "started")

    assert event.worker_id is None
    assert isinstance(event.timestamp, datetime)
    with pytest.raises(attrs.exceptions.FrozenInstanceError):
        event.message = "changed"


def test_public_event_classes_are_documented():
    for cls in (PoolEventType, PoolEvent, PoolEventListener, LoggingEventListener):
        assert cls.__doc__, cls.__name__


def test_base_listener_ignores_events():
    listener = PoolEventListener()

    listener.emit(PoolEventType.WORKER_STARTED, "Worker 0 started", 0)


def test_emit_builds_event(recording_listener):
    recording_listener.emit(PoolEventType.WORKER_JOINED, "Worker 2 joined", 2)

    [event] = recording_listener.events
    assert event.event_type is PoolEventType.WORKER_JOINED
    assert event.message == "Worker 2 joined"
    assert event.worker_id == 2


class TestLoggingEventListener:
    def test_uses_events_logger_by_default(self):
        assert LoggingEventListener().logger.name == "workpool.events"

    def test_task_events_are_logged_at_debug(self, caplog):
        listener = LoggingEventListener()

        with caplog.at_level(logging.DEBUG, logger="workpool"):
            listener.emit(PoolEventType.TASK_RECEIVED, "Worker 0 got a task; executing.", 0)

        [record] = caplog.records
        assert record.levelno == logging.DEBUG
        assert record.getMessage() == "Worker 0 got a task; executing."

    def test_task_events_can_be_logged_at_info(self, caplog):
        listener = LoggingEventListener(log_task_events=True)

        with caplog.at_level(logging.DEBUG, logger="workpool"):
            listener.emit(PoolEventType.TASK_RECEIVED, "Worker 1 got a task; executing.", 1)

        [record] = caplog.records
        assert record.levelno == logging.INFO

    @pytest.mark.parametrize(
        "event_type, level",
        [
            (PoolEventType.POOL_STARTED, logging.INFO),
            (PoolEventType.POOL_STOPPING, logging.INFO),
            (PoolEventType.POOL_STOPPED, logging.INFO),
            (PoolEventType.WORKER_STARTED, logging.DEBUG),
            (PoolEventType.WORKER_STOPPED, logging.DEBUG),
            (PoolEventType.WORKER_JOINED, logging.DEBUG),
        ],
    )
    def test_lifecycle_event_levels(self, caplog, event_type, level):
        listener = LoggingEventListener()

        with caplog.at_level(logging.DEBUG, logger="workpool"):
            listener.emit(event_type, "message")

        assert [record.levelno for record in caplog.records] == [level]

    def test_custom_logger(self, caplog):
        custom = logging.getLogger("workpool.tests.custom")
        listener = LoggingEventListener(logger=custom)

        with caplog.at_level(logging.INFO, logger="workpool"):
            listener.emit(PoolEventType.POOL_STOPPED, "Thread pool shut down")

        [record] = caplog.records
        assert record.name == "workpool.tests.custom"

"""Pytest configuration and fixtures.

Logging Configuration:
---------------------
Application logs are suppressed during tests unless explicitly enabled.

To enable logging for any test:
1. Explicitly use the fixture: def test_something(configure_test_logging): ...
2. Set environment variable: WORKPOOL_ENABLE_TEST_LOGGING=1
3. Use pytest option: pytest --log-cli

Environment variables:
- WORKPOOL_TEST_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
- WORKPOOL_ENABLE_TEST_LOGGING: Enable logging for all tests (set to any value)
"""

import logging
import os
import threading

import pytest

from workpool.core.events import PoolEvent, PoolEventListener, PoolEventType

LOGGERS_TO_QUIET = ["workpool"]


class RecordingListener(PoolEventListener):
    """Event listener that keeps every event it receives."""

    def __init__(self):
        self._lock = threading.Lock()
        self._events: list[PoolEvent] = []

    def on_event(self, event: PoolEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[PoolEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, event_type: PoolEventType) -> list[PoolEvent]:
        return [event for event in self.events if event.event_type is event_type]

    def types(self) -> list[PoolEventType]:
        return [event.event_type for event in self.events]


def pytest_configure(config):
    """Configure pytest and set default log levels.

    By default, suppress application logs during tests unless explicitly enabled.
    """
    if os.environ.get("WORKPOOL_ENABLE_TEST_LOGGING"):
        config.option.log_cli = True
        config.option.log_cli_level = os.environ.get("WORKPOOL_TEST_LOG_LEVEL", "INFO")
        config.option.log_cli_format = (
            "[%(asctime)s] %(levelname)-8s %(threadName)s %(name)s - %(message)s"
        )
        config.option.log_cli_date_format = "%H:%M:%S"
    else:
        for logger_name in LOGGERS_TO_QUIET:
            logging.getLogger(logger_name).setLevel(logging.WARNING)


@pytest.fixture(scope="function")
def configure_test_logging(request):
    """Configure logging for individual tests.

    Environment variables:
    - WORKPOOL_TEST_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    """
    log_level_name = os.environ.get("WORKPOOL_TEST_LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    original_levels = {}
    for logger_name in LOGGERS_TO_QUIET:
        logger = logging.getLogger(logger_name)
        original_levels[logger_name] = logger.level
        logger.setLevel(log_level)

    logging.info(f"Test logging configured for {request.node.name}: level={log_level_name}")

    yield

    for logger_name, original_level in original_levels.items():
        logging.getLogger(logger_name).setLevel(original_level)


@pytest.fixture
def recording_listener():
    """An event listener that records all pool and worker events."""
    return RecordingListener()


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run a test in an empty directory with no config files or env overrides."""
    import platformdirs

    project_dir = tmp_path / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *args, **kwargs: str(tmp_path / "user-config")
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *args, **kwargs: str(tmp_path / "user-log")
    )
    for var in list(os.environ):
        if var.upper().startswith("WORKPOOL_") and var.upper() != "WORKPOOL_ENABLE_TEST_LOGGING":
            monkeypatch.delenv(var, raising=False)

    from workpool.infrastructure import config as config_module

    monkeypatch.setattr(config_module, "_config", None)
    monkeypatch.setattr(config_module, "SYSTEM_CONFIG_DIR", tmp_path / "system-config")
    return project_dir


@pytest.fixture
def restore_logging():
    """Remove handlers installed by setup_logging and restore logger levels afterwards."""
    from workpool.infrastructure.logging import setup as setup_module

    workpool_logger = logging.getLogger("workpool")
    root_logger = logging.getLogger()
    original_level = workpool_logger.level
    original_root_level = root_logger.level

    yield

    while setup_module._installed_handlers:
        handler = setup_module._installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    workpool_logger.setLevel(original_level)
    root_logger.setLevel(original_root_level)

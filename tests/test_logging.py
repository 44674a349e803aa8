"""Tests for logging configuration."""
import json
import logging

from taskmanager.core.logging import HANDLER_NAME, JSONFormatter, configure_logging


def _own_handlers():
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


def test_configure_logging_replaces_only_its_own_handler():
    root = logging.getLogger()
    previous_level = root.level
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(level="INFO", fmt="text")
        configure_logging(level="DEBUG", fmt="json")

        handlers = _own_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert foreign in root.handlers
        assert root.level == logging.DEBUG
    finally:
        root.removeHandler(foreign)
        root.setLevel(previous_level)
        for handler in _own_handlers():
            root.removeHandler(handler)


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "taskmanager.services", logging.INFO, __file__, 1, "Created task %s", (7,), None
    )
    record.task_id = 7

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Created task 7"
    assert payload["level"] == "INFO"
    assert payload["task_id"] == 7

"""
Tests for logging setup and formatters
"""

import json
import logging

import pytest

from fuel_runway.logging_config import ConsoleFormatter, JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        name="fuel_runway.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Tank forecast complete",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_extras_included(self):
        entry = json.loads(JSONFormatter().format(_record(tank_id="T1", data_points=4)))

        assert entry["message"] == "Tank forecast complete"
        assert entry["level"] == "INFO"
        assert entry["tank_id"] == "T1"
        assert entry["data_points"] == 4

    def test_sensitive_fields_masked(self):
        entry = json.loads(JSONFormatter().format(_record(password="hunter2")))

        assert entry["password"] == "***MASKED***"


class TestConsoleFormatter:

    def test_key_values_appended(self):
        line = ConsoleFormatter().format(_record(tank_id="T1"))

        assert "Tank forecast complete" in line
        assert "tank_id=T1" in line


class TestSetupLogging:

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_level_and_format(self):
        setup_logging(level="debug", format_type="json")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_log_file_is_json(self, tmp_path):
        log_file = tmp_path / "runway.log"

        setup_logging(level="INFO", format_type="console", log_file=str(log_file))
        logging.getLogger("fuel_runway.test").info("batch started")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "batch started"

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for the logging helpers.
"""

import json
import logging
import uuid
from logging.handlers import RotatingFileHandler
from unittest.mock import MagicMock

from greenacres_bridge.utils.logger import (
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    JsonFormatter,
    LoggerConfig,
    configure_logger,
    get_logger,
    log_sensitive,
    mask_value,
)


def unique_name(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class TestLoggerConfiguration:
    """Tests for logger creation."""

    def test_get_logger_is_cached(self):
        name = unique_name("cached")
        assert get_logger(name) is get_logger(name)

    def test_console_only_by_default(self, monkeypatch):
        monkeypatch.delenv("LOG_FILE_PATH", raising=False)
        logger = configure_logger(LoggerConfig(name=unique_name("console")))

        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_file_handler_when_path_set(self, tmp_path):
        log_file = tmp_path / "logs" / "bridge.log"
        logger = configure_logger(
            LoggerConfig(name=unique_name("file"), log_file=str(log_file), console_level="ERROR", file_level="DEBUG")
        )

        logger.debug("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "written to file" in log_file.read_text(encoding="utf-8")

    def test_log_file_path_enables_rotating_handler(self, monkeypatch, tmp_path):
        log_file = tmp_path / "bridge.log"
        monkeypatch.setenv("LOG_FILE_PATH", str(log_file))

        logger = configure_logger(LoggerConfig(name=unique_name("rotating")))

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == LOG_FILE_MAX_BYTES
        assert file_handlers[0].backupCount == LOG_FILE_BACKUP_COUNT

    def test_json_logs_from_environment(self, monkeypatch):
        monkeypatch.setenv("JSON_LOGS", "true")
        monkeypatch.delenv("LOG_FILE_PATH", raising=False)

        logger = configure_logger(LoggerConfig(name=unique_name("json")))

        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        config = LoggerConfig(name=unique_name("env"))
        assert config.console_level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format_record(self):
        record = logging.LogRecord("bridge", logging.INFO, __file__, 10, "Lead %s", ("posted",), None)

        data = json.loads(JsonFormatter().format(record))

        assert data["level"] == "INFO"
        assert data["name"] == "bridge"
        assert data["message"] == "Lead posted"


class TestSensitiveLogging:
    """Tests for masking contact data."""

    def test_mask_value(self):
        assert mask_value("+971501234567") == "+***********7"
        assert mask_value("abc") == "***"

    def test_log_sensitive_masks_values(self):
        logger = MagicMock()

        log_sensitive(logger, logging.INFO, "Lead from jane@example.com", email="jane@example.com", phone=None)

        level, message = logger.log.call_args.args
        assert level == logging.INFO
        assert "jane@example.com" not in message
        assert "j**************m" in message

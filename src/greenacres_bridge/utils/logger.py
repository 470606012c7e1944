#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging Configuration Module

Provides the configurable logging setup used across the lead bridge.
Console output is always enabled; a rotating file handler is added when
LOG_FILE_PATH is set.
"""

import os
import sys
import json
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional, Dict, Any, Union

# Default log levels
DEFAULT_CONSOLE_LEVEL = logging.INFO
DEFAULT_FILE_LEVEL = logging.DEBUG

# File rotation
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"

# Environment variable names
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_LOG_FILE_PATH = "LOG_FILE_PATH"
ENV_JSON_LOGS = "JSON_LOGS"

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Global logger registry to avoid duplicate handlers
_loggers: Dict[str, logging.Logger] = {}


def _resolve_level(level: Optional[Union[int, str]], default: int) -> int:
    if level is None:
        return default
    if isinstance(level, str):
        if level.upper() in LOG_LEVELS:
            return LOG_LEVELS[level.upper()]
        try:
            return int(level)
        except ValueError:
            return default
    return level


class LoggerConfig:
    """Configuration class for logger settings."""

    def __init__(
        self,
        name: str = "greenacres_bridge",
        console_level: Optional[Union[int, str]] = None,
        file_level: Optional[Union[int, str]] = None,
        log_file: Optional[str] = None,
        json_logs: Optional[bool] = None,
        propagate: bool = False,
    ):
        """
        Initialize logger configuration.

        Args:
            name: Logger name
            console_level: Console logging level (int or string)
            file_level: File logging level (int or string)
            log_file: Path to log file (None falls back to LOG_FILE_PATH)
            json_logs: Whether to format logs as JSON (None falls back to JSON_LOGS)
            propagate: Whether to propagate to parent loggers
        """
        self.name = name

        env_level = os.environ.get(ENV_LOG_LEVEL)
        self.console_level = _resolve_level(
            console_level if console_level is not None else env_level,
            DEFAULT_CONSOLE_LEVEL,
        )
        self.file_level = _resolve_level(
            file_level if file_level is not None else env_level,
            DEFAULT_FILE_LEVEL,
        )

        # File logging is opt-in
        self.log_file = log_file or os.environ.get(ENV_LOG_FILE_PATH) or None

        if json_logs is None:
            json_logs = os.environ.get(ENV_JSON_LOGS, "false").lower() == "true"
        self.json_logs = json_logs
        self.propagate = propagate


class JsonFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per log record.

    Suited to hosted platforms that ingest structured stdout logs.
    """

    def __init__(
        self,
        fmt_dict: Optional[Dict[str, Any]] = None,
        time_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        super().__init__()
        self.fmt_dict = fmt_dict or {
            "timestamp": "asctime",
            "level": "levelname",
            "name": "name",
            "module": "module",
            "function": "funcName",
            "line": "lineno",
            "message": "message",
        }
        self.time_format = time_format

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the specified record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string representation of the log record
        """
        record.asctime = self.formatTime(record, self.time_format)
        record.message = record.getMessage()

        log_record = {}
        for key, value in self.fmt_dict.items():
            if hasattr(record, value):
                log_record[key] = getattr(record, value)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


def configure_logger(config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Configure a logger with the specified settings.

    Args:
        config: Logger configuration (or None for default)

    Returns:
        Configured logger
    """
    if config is None:
        config = LoggerConfig()

    if config.name in _loggers:
        return _loggers[config.name]

    logger = logging.getLogger(config.name)
    logger.propagate = config.propagate

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if config.json_logs:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(config.console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    levels = [config.console_level]

    if config.log_file:
        os.makedirs(os.path.dirname(os.path.abspath(config.log_file)), exist_ok=True)

        file_handler = RotatingFileHandler(
            config.log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(config.file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        levels.append(config.file_level)

    logger.setLevel(min(levels))

    _loggers[config.name] = logger

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger by name, creating it if it doesn't exist.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name in _loggers:
        return _loggers[name]

    return configure_logger(LoggerConfig(name=name))


def set_log_level(level: Union[int, str]) -> None:
    """
    Change the level of every logger configured so far.

    Args:
        level: New logging level (int or string)
    """
    resolved = _resolve_level(level, DEFAULT_CONSOLE_LEVEL)
    os.environ[ENV_LOG_LEVEL] = logging.getLevelName(resolved)
    for logger in _loggers.values():
        logger.setLevel(resolved)
        for handler in logger.handlers:
            handler.setLevel(resolved)


def log_processing_event(processor: str, event_type: str, message: str, level: int = logging.INFO) -> None:
    """
    Log a processing event.

    Args:
        processor: Processor name
        event_type: Type of event (start, error, complete, etc.)
        message: Event description
        level: Logging level
    """
    logger = get_logger("processing")
    logger.log(level, f"[{processor}] [{event_type}] {message}")


def log_integration_event(integration: str, event_type: str, message: str, level: int = logging.INFO) -> None:
    """
    Log an integration event.

    Args:
        integration: Integration name
        event_type: Type of event (start, error, complete, etc.)
        message: Event description
        level: Logging level
    """
    logger = get_logger("integration")
    logger.log(level, f"[{integration}] [{event_type}] {message}")


def mask_value(value: str) -> str:
    """Mask all but the first and last character of a value."""
    if len(value) > 6:
        return value[0] + "*" * (len(value) - 2) + value[-1]
    return "*" * len(value)


def log_sensitive(logger: logging.Logger, level: int, message: str, **sensitive_data: Any) -> None:
    """
    Log a message while masking sensitive data.

    Args:
        logger: Logger to use
        level: Logging level
        message: Message to log
        sensitive_data: Keys and values to mask in the message
    """
    masked_message = message
    for value in sensitive_data.values():
        if value and isinstance(value, str):
            masked_message = masked_message.replace(value, mask_value(value))

    logger.log(level, masked_message)

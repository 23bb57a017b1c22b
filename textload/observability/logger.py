"""
Structured JSON logging for textload

Driver-side stages (reading sources, running a load, writing errors) log
through these loggers. Per-record rejections are never logged here: they are
routed to the error sink instead.

Configuration comes from the environment unless given explicitly:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
- LOG_FORMAT: json or text (default json)
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

ROOT_LOGGER = "textload"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# LogRecord attribute -> JSON key
RECORD_FIELDS = {
    "name": "logger",
    "module": "module",
    "funcName": "function",
    "process": "process_id",
}


class LoadJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter emitting one object per line with a fixed set of
    call-site fields plus whatever was passed in ``extra``.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname

        for attribute, key in RECORD_FIELDS.items():
            log_record[key] = getattr(record, attribute)


def _formatter(format_type: str) -> logging.Formatter:
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return LoadJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")


def setup_logger(
    name: str = ROOT_LOGGER,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure a logger writing to stdout, replacing any handlers it had.

    Args:
        name: Logger name
        level: Log level name; defaults to $LOG_LEVEL, then INFO
        format_type: "json" or "text"; defaults to $LOG_FORMAT, then json

    Returns:
        Configured logger instance
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter(format_type or os.getenv("LOG_FORMAT") or "json"))

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger, configuring it on first use."""
    logger = logging.getLogger(name)
    return logger if logger.handlers else setup_logger(name)


class log_operation:
    """
    Context manager logging the start and end of a driver-side step.

    The elapsed wall-clock time is kept on ``duration`` after the block
    exits, whether it succeeded or raised. Exceptions are never suppressed.

    Usage:
        with log_operation("load", logger=logger, mode="delimited") as operation:
            ...
        record_load("delimited", accepted, rejected, operation.duration)
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.duration: float | None = None
        self._started: float | None = None

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self._started
        elapsed = round(self.duration, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=elapsed, status="success"),
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra=self._fields(
                    duration_seconds=elapsed,
                    status="error",
                    error_type=exc_type.__name__,
                    error_message=str(exc_val),
                ),
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False

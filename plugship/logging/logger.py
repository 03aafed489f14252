# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for plugship.

Every progress event the orchestrator emits is a single JSON line on stdout:
timestamped, leveled, and tagged with the source module. The child build
tools write their own output to the same terminal, so keeping our lines
machine-parseable makes them easy to pick out of a CI log.

How this works:
  - Python's standard `logging` module does the routing, JsonFormatter turns
    each record into one JSON line.
  - One handler for stdout, and optionally one for a file.
  - `get_logger` is the only way to create loggers in this package.
  - `set_log_level` re-levels every plugship logger at once, which is what
    the `--log-level` flag uses after module-level loggers already exist.
  - `close_log_file` detaches and closes the shared log file when a run ends.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "plugship.pipeline.orchestrator", "msg": "Stage started", "stage": "build"}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "plugship"

# LogRecord attributes that are never copied into the JSON payload.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "relativeCreated",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "pathname",
        "filename",
        "module",
        "levelno",
        "levelname",
        "processName",
        "process",
        "threadName",
        "thread",
        "message",
        "msecs",
        "taskName",
    }
)


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts:     ISO 8601 UTC timestamp
      level:  log level name
      module: the logger name
      msg:    the formatted message string

    Anything passed through `extra=` is merged in as additional fields, which
    is how the pipeline attaches stage names, exit codes and artifact paths.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Calling get_logger twice for the same name must not stack handlers.
    if logger.handlers:
        return logger

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


# The one file handler shared by every plugship logger while a log file is set.
_log_file_handler: Optional[logging.FileHandler] = None


def _package_loggers() -> list[logging.Logger]:
    """Every plugship logger that get_logger has set up."""
    loggers = []
    for name in list(logging.Logger.manager.loggerDict):
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            continue
        logger = logging.getLogger(name)
        if logger.handlers:
            loggers.append(logger)
    return loggers


def set_log_level(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Apply a level (and optionally a log file) to every existing plugship logger.

    Module loggers are created at import time with the default level, so the
    CLI calls this once after parsing its flags. All loggers write to a single
    shared file handler; pointing at a different file closes the previous one.

    Raises:
        OSError: The log file (or its directory) can't be created.
    """
    global _log_file_handler

    level = _resolve_log_level(log_level)

    if log_file is not None:
        target = log_file.resolve()
        current = _log_file_handler
        if current is None or Path(current.baseFilename) != target:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(str(log_file), encoding="utf-8")
            handler.setFormatter(JsonFormatter())
            close_log_file()
            _log_file_handler = handler

    for logger in _package_loggers():
        logger.setLevel(level)
        if _log_file_handler is not None and _log_file_handler not in logger.handlers:
            logger.addHandler(_log_file_handler)


def close_log_file() -> None:
    """Detach the shared log file handler from every logger and close it."""
    global _log_file_handler

    handler = _log_file_handler
    if handler is None:
        return
    _log_file_handler = None
    for logger in _package_loggers():
        logger.removeHandler(handler)
    handler.close()

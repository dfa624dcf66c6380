# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for rtimeit.

Every log entry is a single JSON line with a timestamp, level, source module
and message, plus whatever structured context the caller attaches via `extra`.

Log lines go to stderr, never stdout. stdout belongs to the comparison report
so that `rtimeit ... > report.txt` captures the table and nothing else.

The JSON structure looks like:
  {"ts": "2026-...", "level": "INFO", "module": "rtimeit.driver.runner", "msg": "state transition", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came in
# through `extra` and belongs in the JSON entry.
_STANDARD_ATTRS = frozenset({
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
})


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts     : ISO 8601 UTC timestamp
      level  : log level name
      module : the logger name (usually the Python module path)
      msg    : the formatted message string

    Extra keyword context is merged in as additional fields. Exception info,
    when present, is rendered into an `exc` field so tracebacks stay on one line.
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
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Settings from the last configure_logging call. Loggers created afterwards,
# by modules the CLI imports lazily, start from these instead of the defaults.
_DEFAULT_LOG_LEVEL = "WARNING"
_active_level = _DEFAULT_LOG_LEVEL
_active_log_file: Optional[Path] = None


def _resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def _has_file_handler(logger: logging.Logger) -> bool:
    return any(isinstance(handler, logging.FileHandler) for handler in logger.handlers)


def _add_file_handler(logger: logging.Logger, log_file: Path, formatter: logging.Formatter) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def get_logger(
    name: str,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Every module calls this once at import time with its __name__. Level and
    log file default to whatever `configure_logging` last applied (WARNING and
    no file before the CLI has run), so a module imported after bootstrap
    still honours --log-level and global.log_file.

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL. Overrides
                   the configured level for this logger.
        log_file: Optional path to a log file. If provided, logs go to both
                  stderr and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    if log_file is None:
        log_file = _active_log_file

    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level if log_level is not None else _active_level)
    logger.setLevel(level)

    # Calling get_logger twice for the same name must not stack handlers.
    if logger.handlers:
        return logger

    formatter = JsonFormatter()

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if log_file is not None:
        _add_file_handler(logger, log_file, formatter)

    logger.propagate = False

    return logger


def configure_logging(log_level: str, log_file: Optional[Path] = None) -> None:
    """
    Apply a level (and optional log file) to every rtimeit logger.

    Loggers that already exist are updated in place. The settings are also
    remembered, so loggers created later by lazily imported modules start
    out the same way.
    """
    global _active_level, _active_log_file

    level = _resolve_log_level(log_level)
    _active_level = log_level.upper()
    _active_log_file = log_file
    formatter = JsonFormatter()

    for name in list(logging.Logger.manager.loggerDict):
        if name != "rtimeit" and not name.startswith("rtimeit."):
            continue
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if log_file is not None and not _has_file_handler(logger):
            _add_file_handler(logger, log_file, formatter)

"""
Logging configuration for multidistances.

Library modules only call :func:`get_logger`; nothing is printed until the
CLI (or an embedding application) calls :func:`setup_logging` on the
package logger. Operation records carry their context (metric name, item
count, worker count, ...) as structured fields, which the JSON-lines file
handler writes out verbatim.
"""

import json
import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

PACKAGE_LOGGER = "multidistances"

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Rotate the JSON log at 5MB, keep three old files
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with operation context flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'time': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        operation = getattr(record, 'operation', None)
        if operation is not None:
            entry['operation'] = operation
        entry.update(getattr(record, 'context', None) or {})
        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Text formatter that colors the level name when writing to a terminal."""

    LEVEL_COLORS = {
        'DEBUG': '\033[2m',      # Dim
        'INFO': '\033[36m',      # Cyan
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[1;31m',
    }
    RESET = '\033[0m'

    def __init__(self, color: bool = False):
        super().__init__(TEXT_FORMAT, datefmt=DATE_FORMAT)
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        code = self.LEVEL_COLORS.get(record.levelname) if self.color else None
        if code is None:
            return text
        return text.replace(record.levelname, f"{code}{record.levelname}{self.RESET}", 1)


def setup_logging(
    level: Union[str, int] = 'WARNING',
    log_file: Optional[Path] = None,
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Calling it again replaces the previous handlers, so the CLI can call it
    once per invocation.

    Args:
        level: Console level name or number
        log_file: Also write every record (DEBUG and up) as JSON lines here
        name: Logger to configure

    Returns:
        The configured logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter(color=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Module logger; records propagate to the package logger."""
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, **context):
    """
    Log the start of an operation at INFO with its context as fields.

    Args:
        logger: Logger instance
        operation: Operation name
        **context: Fields to attach (metric, items, ...)
    """
    details = ", ".join(f"{k}={v}" for k, v in context.items())
    logger.info(f"{operation}: {details}" if details else operation,
                extra={'operation': operation, 'context': context})


@contextmanager
def timed_operation(logger: logging.Logger, operation: str, **context) -> Iterator[Dict[str, Any]]:
    """
    Log an operation's start and, on success, its duration.

    Yields the context dict so the caller can add fields to the completion
    record.
    """
    log_operation(logger, operation, **context)
    start = time.perf_counter()
    yield context
    elapsed = time.perf_counter() - start
    logger.info(f"{operation} finished in {elapsed:.2f}s",
                extra={'operation': operation, 'context': {**context, 'duration': round(elapsed, 4)}})

"""
Logging utilities for streaming toolkit logs to a front end.

A front end attaches a queue handler to the package logger and drains the
queue from its own loop into a console or progress panel. The library never
configures the root logger itself.
"""
from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import List, NamedTuple, Optional

PACKAGE_LOGGER = "zine_toolkit"


class LogLine(NamedTuple):
    message: str
    level: str
    source: str


class QueueLogHandler(logging.Handler):
    """
    A logging handler that sends formatted records to a queue as LogLines.

    DEBUG is reported as INFO; front ends show two tiers at most.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = record.levelname
            if level == "DEBUG":
                level = "INFO"
            self.log_queue.put_nowait(LogLine(self.format(record), level, record.name))
        except Exception:
            self.handleError(record)


def attach_queue_handler(
    log_queue: Queue,
    logger_name: Optional[str] = PACKAGE_LOGGER,
    level: int = logging.INFO,
) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to the given logger (the package logger by default).

    Args:
        log_queue: Queue to send log lines to.
        logger_name: Logger to attach to. None = root logger.
        level: Minimum level forwarded.

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = QueueLogHandler(log_queue, level)
    logger.addHandler(handler)
    if logger.getEffectiveLevel() > level:
        logger.setLevel(level)
    return handler


def detach_queue_handler(
    handler: QueueLogHandler,
    logger_name: Optional[str] = PACKAGE_LOGGER,
) -> None:
    """Remove a QueueLogHandler from the given logger."""
    logging.getLogger(logger_name).removeHandler(handler)


def drain_queue(log_queue: Queue, limit: Optional[int] = None) -> List[LogLine]:
    """Pop every pending line (up to limit) without blocking."""
    lines: List[LogLine] = []
    while limit is None or len(lines) < limit:
        try:
            lines.append(log_queue.get_nowait())
        except Empty:
            break
    return lines

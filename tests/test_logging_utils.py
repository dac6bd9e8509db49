"""
Tests for forwarding package logs to a queue.
"""

import logging
from queue import Queue

from zine_toolkit.common.logging_utils import (
    LogLine,
    attach_queue_handler,
    detach_queue_handler,
    drain_queue,
)


class TestQueueLogHandler:
    def test_attach_when_package_logs_then_lines_queued(self):
        log_queue = Queue()
        handler = attach_queue_handler(log_queue)
        try:
            logging.getLogger("zine_toolkit.editor.pages").info("Loaded document d1")
        finally:
            detach_queue_handler(handler)

        lines = drain_queue(log_queue)
        assert lines == [LogLine("Loaded document d1", "INFO", "zine_toolkit.editor.pages")]

    def test_attach_when_debug_forwarded_then_reported_as_info(self):
        log_queue = Queue()
        handler = attach_queue_handler(log_queue, level=logging.DEBUG)
        try:
            logging.getLogger("zine_toolkit.layout").debug("batch sizes")
        finally:
            detach_queue_handler(handler)

        assert drain_queue(log_queue)[0].level == "INFO"

    def test_detach_when_removed_then_nothing_queued(self):
        log_queue = Queue()
        handler = attach_queue_handler(log_queue)
        detach_queue_handler(handler)

        logging.getLogger("zine_toolkit").warning("ignored")

        assert drain_queue(log_queue) == []

    def test_drain_when_limit_then_rest_left_queued(self):
        log_queue = Queue()
        for n in range(5):
            log_queue.put(LogLine(str(n), "INFO", "test"))

        assert len(drain_queue(log_queue, limit=2)) == 2
        assert len(drain_queue(log_queue)) == 3

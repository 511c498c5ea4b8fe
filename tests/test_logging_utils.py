import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
import logging
import threading
from logging.handlers import QueueHandler
import logging_utils


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.threads = []

    def emit(self, record):
        self.records.append(self.format(record))
        self.threads.append(threading.current_thread())


def _reset_root():
    logging_utils.shutdown_logging()
    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h, QueueHandler)]


def test_configure_root_forwards_warnings_off_thread():
    """원격 핸들러는 호출한 스레드가 아닌 백그라운드 스레드에서 실행된다."""
    capture = _Capture()
    try:
        logging_utils.configure_root(capture, level="DEBUG")
        log = logging.getLogger("sync.test")
        log.info("routine pass")
        log.warning("calendar %s unreachable", "cal-1")
        logging_utils.shutdown_logging()
    finally:
        _reset_root()

    assert len(capture.records) == 1
    assert "[WARNING] sync.test: calendar cal-1 unreachable" in capture.records[0]
    assert capture.threads[0] is not threading.main_thread()


def test_configure_root_replaces_previous_handlers():
    first, second = _Capture(), _Capture()
    try:
        logging_utils.configure_root(first)
        logging_utils.configure_root(second)
        root = logging.getLogger()
        assert sum(isinstance(h, QueueHandler) for h in root.handlers) == 1
        logging.getLogger("sync.test").error("boom")
        logging_utils.shutdown_logging()
    finally:
        _reset_root()

    assert first.records == []
    assert len(second.records) == 1


def test_get_logger_is_idempotent():
    log = logging_utils.get_logger("sync.idem")

    assert logging_utils.get_logger("sync.idem") is log
    assert len(log.handlers) == 1

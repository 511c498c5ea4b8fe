"""Logging setup shared by the sync modules, built on :mod:`logging`."""
import atexit
import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_listener: Optional[QueueListener] = None


def get_logger(name: str = __name__) -> logging.Logger:
    """Return a module logger that prints to stderr at ``LOG_LEVEL``.

    Records still propagate to the root logger, so handlers installed by
    :func:`configure_root` (Slack forwarding) see them too.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(LOG_LEVEL)
    return logger


def configure_root(
    *handlers: logging.Handler,
    level: str = LOG_LEVEL,
    handler_level: Optional[int] = logging.WARNING,
) -> logging.Logger:
    """Route root records to ``handlers`` on a background thread.

    Remote handlers such as Slack webhooks block on the network, so they are
    driven by a :class:`~logging.handlers.QueueListener` rather than by the
    thread (or event loop) that logged. Calling again replaces the previous
    handlers.
    """
    global _listener
    shutdown_logging()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [h for h in root.handlers if not isinstance(h, QueueHandler)]
    for handler in handlers:
        if handler_level is not None:
            handler.setLevel(handler_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log_queue: queue.Queue = queue.Queue(-1)
    root.addHandler(QueueHandler(log_queue))
    _listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    _listener.start()
    return root


def shutdown_logging() -> None:
    """Flush and stop the background listener, if one is running."""
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None


atexit.register(shutdown_logging)

"""Logging utilities for export jobs."""

from __future__ import annotations

import logging
import queue
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import Any, Optional


_ROOT_LOGGER_NAME = "dataroot_export"
_CONSOLE_FILTER_FLAG = "to_console"
_queue_listener: Optional[QueueListener] = None

_STANDARD_LOG_ATTRS = set(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", _CONSOLE_FILTER_FLAG}


class _ConsoleFilter(logging.Filter):
    """Allow only records flagged for console emission."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - simple predicate
        return bool(getattr(record, _CONSOLE_FILTER_FLAG, False))


class ExtraFormatter(logging.Formatter):
    """Formatter that appends log-record extras (phase, paths) to the output."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_LOG_ATTRS and not key.startswith("_")
        }
        if extras:
            formatted = f"{formatted} | {extras}"
        return formatted


def configure_logging(
    *,
    log_to_file: bool,
    log_file: Optional[Path],
    log_to_console: bool,
    level: str = "INFO",
) -> None:
    """Configure logging sinks for this run."""

    global _queue_listener
    stop_logging()

    formatter = ExtraFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handlers: list[logging.Handler] = []
    if log_to_file and log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    export_logger = logging.getLogger(_ROOT_LOGGER_NAME)
    export_logger.setLevel(logging.DEBUG)
    export_logger.propagate = True

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        console_handler.addFilter(_ConsoleFilter())
        handlers.append(console_handler)

    if not handlers:
        # Fallback to console output when no other handlers exist.
        fallback_handler = logging.StreamHandler()
        fallback_handler.setFormatter(formatter)
        handlers.append(fallback_handler)

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    queue_handler = QueueHandler(log_queue)
    root_logger.addHandler(queue_handler)
    _queue_listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    _queue_listener.start()


def stop_logging() -> None:
    """Flush and stop the background listener started by ``configure_logging``."""

    global _queue_listener
    if _queue_listener is not None:
        _queue_listener.stop()
        _queue_listener = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger rooted under ``dataroot_export``."""

    if not name or name == _ROOT_LOGGER_NAME:
        return logging.getLogger(_ROOT_LOGGER_NAME)
    if name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


def console_kwargs() -> dict[str, bool]:
    """Helper to flag log records for console emission."""

    return {_CONSOLE_FILTER_FLAG: True}


def phase_extra(phase: str, **fields: Any) -> dict[str, Any]:
    """Build ``extra`` for an export event: its phase plus the console flag."""

    return {"phase": phase, **fields, **console_kwargs()}


__all__ = [
    "ExtraFormatter",
    "configure_logging",
    "console_kwargs",
    "get_logger",
    "phase_extra",
    "stop_logging",
]

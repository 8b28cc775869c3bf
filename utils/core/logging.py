#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration and utilities
"""

# Standard library imports
import logging
import os
import queue
import sys
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

# Local imports
from config import LOG_SEPARATOR_WIDTH, LOG_TIMESTAMP_FORMAT

# Global log mode (set by setup_logging)
_CURRENT_LOG_MODE = 'customer'

# Handlers owned by setup_logging, closed on the next call
_INSTALLED_HANDLERS = []

_FORMATS = {
    'customer': "%(_when)s | %(message)s",
    'verbose': "%(_when)s | %(levelname)-7s | %(message)s",
    'debug': "%(_when)s | %(levelname)-7s | %(name)-15s | %(funcName)-20s | %(message)s",
}


def get_log_mode() -> str:
    """Get the current logging mode"""
    return _CURRENT_LOG_MODE


class QueueHandler(logging.Handler):
    """A queue-based handler that never blocks the calling thread"""

    def __init__(self, target_handler: logging.Handler):
        super().__init__()
        self.target_handler = target_handler
        self.queue = queue.Queue(maxsize=1000)
        self._stop_event = threading.Event()
        self.worker_thread = threading.Thread(target=self._worker, daemon=True, name="LogQueueWorker")
        self.worker_thread.start()

    def _worker(self):
        while not self._stop_event.is_set():
            try:
                record = self.queue.get(timeout=0.1)
            except queue.Empty:
                continue
            if record is None:  # Sentinel
                break
            try:
                self.target_handler.emit(record)
            except Exception:
                self.target_handler.handleError(record)
            finally:
                self.queue.task_done()

    def emit(self, record):
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            # Drop rather than block the caller
            pass

    def close(self):
        """Stop the worker thread, flushing what is already queued"""
        try:
            self.queue.put_nowait(None)
        except queue.Full:
            self._stop_event.set()
        if self.worker_thread.is_alive():
            self.worker_thread.join(timeout=1.0)
        self.target_handler.close()
        super().close()


class SafeStreamHandler(logging.StreamHandler):
    """A stream handler that tolerates missing or broken streams"""

    def __init__(self, stream=None):
        if stream is None:
            import io
            stream = io.StringIO()
        super().__init__(stream)

    def emit(self, record):
        try:
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            self.stream.flush()
        except (BlockingIOError, BrokenPipeError, AttributeError, OSError, ValueError):
            pass


class _Fmt(logging.Formatter):
    def __init__(self, fmt: str, when_format: str = "%H:%M:%S"):
        super().__init__(fmt)
        self.when_format = when_format

    def format(self, record):
        record._when = time.strftime(self.when_format, time.localtime(record.created))
        return super().format(record)


def _level_for_mode(log_mode: str) -> int:
    if log_mode in ('verbose', 'debug'):
        return logging.DEBUG
    return logging.INFO


def _remove_installed_handlers(root: logging.Logger):
    """Detach and close handlers added by a previous setup_logging call"""
    while _INSTALLED_HANDLERS:
        handler = _INSTALLED_HANDLERS.pop()
        root.removeHandler(handler)
        handler.close()


def setup_logging(log_mode: str = 'customer', *, write_logs: bool = False) -> Optional[Path]:
    """
    Setup logging configuration with three modes.

    Args:
        log_mode: 'customer' (clean logs), 'verbose' (developer), or 'debug' (ultra-detailed)
        write_logs: If True, also write a per-session log file in the user data directory.

    Returns:
        Path of the session log file, or None when file logging is off
    """
    global _CURRENT_LOG_MODE
    if log_mode not in _FORMATS:
        raise ValueError(f"Unknown log mode: {log_mode}")
    _CURRENT_LOG_MODE = log_mode
    fmt = _FORMATS[log_mode]
    level = _level_for_mode(log_mode)

    # stdout may be redirected to devnull when running windowed
    if sys.stdout is not None and getattr(sys.stdout, 'name', None) == os.devnull:
        output_stream = sys.stderr
    else:
        output_stream = sys.stdout if sys.stdout is not None else sys.stderr

    stream_handler = SafeStreamHandler(output_stream)
    stream_handler.setFormatter(_Fmt(fmt))
    console = QueueHandler(stream_handler)
    console.setLevel(level)

    root = logging.getLogger()
    _remove_installed_handlers(root)
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(logging.DEBUG)
    _INSTALLED_HANDLERS.append(console)

    log_file = None
    if write_logs:
        try:
            from .paths import get_logs_dir
            timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
            log_file = get_logs_dir() / f"mineskin_{timestamp}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(_Fmt(fmt, "%Y-%m-%d %H:%M:%S"))
            file_handler.setLevel(level)
            root.addHandler(file_handler)
            _INSTALLED_HANDLERS.append(file_handler)
        except OSError as e:
            log_file = None
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    # Suppress HTTPS/HTTP logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    return log_file


def get_logger(name: str = "mineskin") -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)


# ==================== Pretty Logging Helpers ====================

def log_section(logger: logging.Logger, title: str, icon: str = "📌", details: dict = None, mode: str = None):
    """
    Log a section with title and optional details

    Args:
        logger: Logger instance
        title: Main title text (will be uppercased in verbose/debug mode)
        icon: Emoji icon to use
        details: Optional dict of key-value pairs to display
        mode: 'customer', 'verbose' or 'debug'. If None, uses current global log mode.

    Example:
        log_section(log, "Skin Generated", "🎨", {"Id": 1234, "Model": "slim"})
    """
    if mode is None:
        mode = get_log_mode()

    if mode == 'customer':
        if details:
            detail_str = ", ".join(f"{k}: {v}" for k, v in details.items())
            logger.info(f"{icon} {title} ({detail_str})")
        else:
            logger.info(f"{icon} {title}")
    else:
        logger.info("=" * LOG_SEPARATOR_WIDTH)
        logger.info(f"{icon} {title.upper()}")
        if details:
            for key, value in details.items():
                logger.info(f"   📋 {key}: {value}")
        logger.info("=" * LOG_SEPARATOR_WIDTH)


def log_event(logger: logging.Logger, event: str, icon: str = "✓", details: dict = None):
    """Log a single event with optional details"""
    logger.info(f"{icon} {event}")
    if details:
        for key, value in details.items():
            logger.info(f"   • {key}: {value}")


def log_success(logger: logging.Logger, message: str, icon: str = "✅"):
    """Log a success message"""
    logger.info(f"{icon} {message}")

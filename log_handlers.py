#!/usr/bin/env python3
"""
🔹 Log Handler Module 🔹

The process-wide registry of log handlers plus composable handler transforms.

A log handler is any callable that accepts a LogRecord. It should not change
the record and should not raise. When no handler is registered, records go to
the console handler.

Features:
    • Idempotent (un)registration and nestable capture/restore of handlers
    • Level and logger-name filters
    • Deferred dispatch on the asyncio event loop
    • Bounded ring buffer capture of the most recent records
    • Colourised console output through colorlog, details pretty-printed by rich
"""

import asyncio
import logging
import sys
import threading
from collections import deque
from typing import Callable, Deque, List, NamedTuple, Optional, Pattern, TextIO, Union

import colorlog
from rich.pretty import pretty_repr

from informant_config import colors_enabled, settings
from log_levels import Level, LogLevel, level_name
from log_record import LogRecord

LogHandler = Callable[[LogRecord], None]

# All currently registered log handlers, in registration order.
log_handlers: List[LogHandler] = []
_registry_lock = threading.RLock()

# =============================================================================
# Registry
# =============================================================================
def register_log_handler(handler: LogHandler) -> None:
    """Register a log handler, unless it is already registered."""
    with _registry_lock:
        if handler not in log_handlers:
            log_handlers.append(handler)

def unregister_log_handler(handler: LogHandler) -> None:
    """Unregister a log handler; does nothing if it is not registered."""
    with _registry_lock:
        if handler in log_handlers:
            log_handlers.remove(handler)

def dispatch(record: LogRecord) -> None:
    """
    Hand the record to every registered handler in registration order, or to
    the console handler if none is registered.

    Exceptions raised by a handler propagate to the caller.
    """
    handlers = tuple(log_handlers)
    if not handlers:
        console_handler(record)
        return
    for handler in handlers:
        handler(record)

class LogCapture(NamedTuple):
    """
    The result of capture_logging: the captured records and a restore function.

    Usage:
        records, restore = capture_logging()

        with capture_logging() as capture:
            ...
            capture.records
    """
    records: List[LogRecord]
    restore: Callable[[], None]

    def __enter__(self) -> "LogCapture":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.restore()
        return False  # Don't suppress exceptions

def capture_logging() -> LogCapture:
    """
    Temporarily replace all log handlers with one that records every record.

    Call ``restore()`` afterwards to reinstate the previous handlers.
    """
    records: List[LogRecord] = []

    def capture(record: LogRecord) -> None:
        records.append(record)

    with _registry_lock:
        saved = list(log_handlers)
        log_handlers[:] = [capture]

    def restore() -> None:
        with _registry_lock:
            unregister_log_handler(capture)
            for handler in saved:
                register_log_handler(handler)

    return LogCapture(records, restore)

# =============================================================================
# Combinators
# =============================================================================
def from_level(level: Level, handler: LogHandler) -> LogHandler:
    """Ensure the handler only receives records of the given level or above."""
    def level_filter(record: LogRecord) -> None:
        if record.level >= level:
            handler(record)
    return level_filter

def for_logger(name: Union[str, Pattern[str]], handler: LogHandler) -> LogHandler:
    """
    Ensure the handler only receives records of some loggers.

    Args:
        name: Either a logger name, matching that logger and all of its
            descendants, or a compiled regular expression that is searched for
            in the logger name.
        handler: The handler to forward matching records to.
    """
    if isinstance(name, str):
        prefix = name + "."

        def name_filter(record: LogRecord) -> None:
            if record.logger == name or record.logger.startswith(prefix):
                handler(record)
    else:
        def name_filter(record: LogRecord) -> None:
            if name.search(record.logger):
                handler(record)
    return name_filter

def async_handler(handler: LogHandler, loop: Optional[asyncio.AbstractEventLoop] = None) -> LogHandler:
    """
    Wrap the handler so that it is called in a later turn of the event loop.

    Records are handed over in dispatch order. Without an explicit loop the
    running loop is used; when no loop is running the handler is called
    directly. Records dispatched from other threads are handed over safely.
    """
    def deferred(record: LogRecord) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        target = loop if loop is not None else running
        if target is None:
            handler(record)
        elif target is running:
            target.call_soon(handler, record)
        else:
            # Dispatched from outside the loop's thread.
            target.call_soon_threadsafe(handler, record)
    return deferred

class RingBuffer:
    """
    A log handler that keeps the last ``max_size`` records, e.g. to include
    the most recent records in an error report.
    """

    def __init__(self, max_size: int = 100):
        if max_size < 1:
            raise ValueError(f"RingBuffer max_size must be at least 1, got {max_size}")
        self.max_size = max_size
        self._items: Deque = deque(maxlen=max_size)

    def __call__(self, item) -> None:
        self._items.append(item)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def size(self) -> int:
        """The number of items currently held."""
        return len(self._items)

    def get(self) -> list:
        """The held items, oldest first."""
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

def ring_buffer(max_size: Optional[int] = None) -> RingBuffer:
    """Create a RingBuffer; the default capacity comes from the settings (100)."""
    return RingBuffer(settings.ring_buffer_size if max_size is None else max_size)

# =============================================================================
# Console Handler
# =============================================================================
CONSOLE_LOGGER_NAME = "informant.console"

TERMINAL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
}

_console = logging.getLogger(CONSOLE_LOGGER_NAME)

def configure_console(enable_colors: Optional[bool] = None, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    (Re)configure the stream handler behind the console handler.

    Args:
        enable_colors: Colourise output with colorlog; defaults to the settings.
        stream: The stream to write to; defaults to stderr.

    Returns:
        logging.Handler: The installed handler.
    """
    if enable_colors is None:
        enable_colors = colors_enabled()
    stream = stream or sys.stderr

    for handler in _console.handlers[:]:
        _console.removeHandler(handler)

    if enable_colors:
        handler = colorlog.StreamHandler(stream)
        handler.setFormatter(colorlog.ColoredFormatter("%(log_color)s%(message)s", log_colors=TERMINAL_COLORS))
    else:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

    _console.addHandler(handler)
    _console.setLevel(logging.DEBUG)
    _console.propagate = False
    return handler

def format_console_message(record: LogRecord) -> str:
    """Render a record as ``[<ISO time>]\\t<LEVEL>\\t<logger>: <message>[, details: ...]``."""
    msg = f"[{record.iso_time}]\t{level_name(record.level)}\t{record.logger}: {record.message}"
    if record.details is not None:
        msg += f", details: {pretty_repr(dict(record.details))}"
    return msg

def console_handler(record: LogRecord) -> None:
    """
    A basic console handler, used when no handler is registered.

    Errors go to the error stream, warnings to the warning stream, info and
    above-info records to the info stream and everything below info to the
    debug stream.
    """
    level = record.level
    if level >= LogLevel.ERROR:
        stream_level = logging.ERROR
    elif level >= LogLevel.WARNING:
        stream_level = logging.WARNING
    elif level >= LogLevel.INFO:
        stream_level = logging.INFO
    else:
        stream_level = logging.DEBUG
    _console.log(stream_level, format_console_message(record))

# =============================================================================
# Automatic Configuration When Module is Imported
# =============================================================================
configure_console()

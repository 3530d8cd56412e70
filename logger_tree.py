#!/usr/bin/env python3
"""
🔹 Logger Tree Module 🔹

Hierarchical, named loggers with independently adjustable levels.

Loggers form a single process-wide tree rooted at the logger with the empty
name. Dotted names address descendants: ``get_logger("app.db")`` is the child
``db`` of the child ``app`` of the root. Loggers are created on first lookup,
start out with the level their parent has at that moment, and live for the
rest of the process.

Usage:
    logger = get_logger("app.db")
    logger.info("connected to %s", url)
    logger.error(err, {"query": sql}, "query failed")
    if logger.debug():
        logger.debug("expensive state: %s", dump_state())
"""

import threading
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

from error_chain import InvalidNameError, error_info, full_stack
from informant_config import settings
from log_handlers import dispatch
from log_levels import LEVELS, Level, LogLevel, level_name, parse_level
from log_record import LogRecord
from text_format import Inspector, describe_error

LogMethod = Callable[..., bool]

_tree_lock = threading.RLock()


class Logger:
    """
    A named node in the logger tree.

    Do not instantiate Logger directly; use ``Logger.get`` or ``get_logger``.

    Every level has a log method (``trace``, ``debug``, ``performance``,
    ``info``, ``warning`` and ``error``) that accepts these call shapes:

        logger.info()                              # is info enabled?
        logger.info("format %s", arg, ...)
        logger.info({"details": 1}, "format %s", arg, ...)
        logger.info(err, "format %s", arg, ...)
        logger.info(err, {"details": 1}, "format %s", arg, ...)

    Each returns True iff the level is enabled.
    """

    trace: LogMethod
    debug: LogMethod
    performance: LogMethod
    info: LogMethod
    warning: LogMethod
    error: LogMethod

    def __init__(self, name: str, level: Level):
        self._name = name
        #: Only messages of this level and higher are logged.
        self.level = level
        self._children: Dict[str, "Logger"] = {}

    @staticmethod
    def get(path: Union[str, Sequence[str]] = "") -> "Logger":
        """Get or create the logger with the given dotted name (or list of names)."""
        return _root.child_logger(path)

    @property
    def name(self) -> str:
        """The fully-qualified dotted name, present in all records of this logger."""
        return self._name

    @property
    def child_loggers(self) -> Mapping[str, "Logger"]:
        """A read-only view of the direct children, by their own (undotted) name."""
        return MappingProxyType(self._children)

    def child_logger(self, path: Union[str, Sequence[str]]) -> "Logger":
        """
        Get or create a descendant logger.

        Args:
            path: A dotted path ("child.grandchild") or a sequence of names.
                An empty string or empty sequence returns this logger.

        Returns:
            Logger: The descendant.

        Raises:
            InvalidNameError: If any name in the path is empty.
        """
        if isinstance(path, str):
            if path == "":
                return self
            segments = path.split(".")
        else:
            segments = list(path)
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise InvalidNameError(f"Invalid empty logger name in path {path!r}")

        node = self
        with _tree_lock:
            for segment in segments:
                child = node._children.get(segment)
                if child is None:
                    qualified = f"{node._name}.{segment}" if node._name else segment
                    child = node._children[segment] = Logger(qualified, node.level)
                node = child
        return node

    def set_level(self, level: Union[Level, str]) -> "Logger":
        """Set the level of this logger from a LogLevel, rank or level name."""
        self.level = parse_level(level)
        return self

    def set_child_loggers_level(self, level: Union[Level, str]) -> "Logger":
        """Set the level of this logger and all of its descendants."""
        level = parse_level(level)
        with _tree_lock:
            pending = [self]
            while pending:
                node = pending.pop()
                node.level = level
                pending.extend(node._children.values())
        return self

    def is_enabled_for(self, level: Level) -> bool:
        """Whether records of the given level would be logged."""
        return self.level <= level

    def trace_wrap(self, name: str, func: Callable, inspector: Optional[Inspector] = None) -> Callable:
        """Wrap func to log every call, result and error at trace level."""
        from log_decorators import trace_wrap
        return trace_wrap(self, name, func, inspector)

    def measure_wrap(self, name: str, func: Callable, inspector: Optional[Inspector] = None) -> Callable:
        """Wrap func to log its duration at performance level."""
        from log_decorators import measure_wrap
        return measure_wrap(self, name, func, inspector)

    def __repr__(self) -> str:
        return f"<Logger {self._name or '(root)'!s} level={level_name(self.level)}>"


# =============================================================================
# Log Methods
# =============================================================================
def create_log_record(logger_name: str, level: LogLevel, args: Tuple[Any, ...]) -> LogRecord:
    """
    Normalize the arguments of a log call into a LogRecord.

    The arguments are an optional leading error, an optional details mapping
    and the message parts. Details from an error (its full stack and info)
    are merged under the explicit details.
    """
    rest = args
    error = rest[0] if isinstance(rest[0], BaseException) else None
    if error is not None:
        rest = rest[1:]
    explicit = rest[0] if rest and isinstance(rest[0], Mapping) else None
    if explicit is not None:
        rest = rest[1:]

    if error is not None:
        details: Optional[Mapping[str, Any]] = {"stack": full_stack(error), **error_info(error), **(explicit or {})}
    else:
        details = explicit

    if rest:
        fmt, params = rest[0], rest[1:]
    elif error is not None:
        fmt, params = describe_error(error), ()
    else:
        fmt, params = "", ()
    return LogRecord(logger_name, level, datetime.now(timezone.utc), details, fmt, params)


def _create_log_method(level: LogLevel) -> LogMethod:
    def log(self: Logger, *args: Any) -> bool:
        if self.level > level:
            return False
        if args:
            dispatch(create_log_record(self._name, level, args))
        return True

    log.__name__ = level.name.lower()
    log.__qualname__ = f"Logger.{log.__name__}"
    log.__doc__ = f"Log on level {level.name}; returns whether {level.name} is enabled."
    return log


for _level in LEVELS:
    setattr(Logger, _level.name.lower(), _create_log_method(_level))

# =============================================================================
# The Tree
# =============================================================================
_root = Logger("", parse_level(settings.log_level))


def get_logger(name: Union[str, Sequence[str]] = "") -> Logger:
    """
    Get or create the logger with the given dotted name.

    Args:
        name (str): Logger name, typically __name__. The empty name is the root.

    Returns:
        Logger: The logger.
    """
    return Logger.get(name)


def reset_loggers() -> None:
    """Drop all loggers below the root and reset the root level. Meant for tests."""
    with _tree_lock:
        _root._children.clear()
        _root.level = parse_level(settings.log_level)

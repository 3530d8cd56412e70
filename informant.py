"""
Informant is a simple and fast structured logging library.

Quick Start:
    >>> from informant import get_logger, register_log_handler, console_handler
    >>> register_log_handler(console_handler)
    >>> logger = get_logger(__name__)
    >>> logger.info("Hello %s", "world")

Host applications register their handlers during startup. Until a handler is
registered, records are written to the console.
"""

from error_chain import (
    BaseError,
    DecoratorUsageError,
    InfoObject,
    InformantError,
    InvalidConstructionError,
    InvalidNameError,
    MultiError,
    error_for_each,
    error_from_list,
    error_info,
    find_cause_by_name,
    full_stack,
    has_cause_with_name,
)
from log_decorators import deprecated, measure, trace
from log_handlers import (
    LogCapture,
    LogHandler,
    RingBuffer,
    async_handler,
    capture_logging,
    configure_console,
    console_handler,
    for_logger,
    from_level,
    register_log_handler,
    ring_buffer,
    unregister_log_handler,
)
from log_levels import LEVELS, LOG_EVERYTHING, LOG_NOTHING, LogLevel, level_name, parse_level
from log_record import LogRecord
from logger_tree import Logger, LogMethod, get_logger, reset_loggers

__version__ = "1.2.0"

__all__ = [
    'BaseError',
    'DecoratorUsageError',
    'InfoObject',
    'InformantError',
    'InvalidConstructionError',
    'InvalidNameError',
    'LEVELS',
    'LOG_EVERYTHING',
    'LOG_NOTHING',
    'LogCapture',
    'LogHandler',
    'LogLevel',
    'LogMethod',
    'LogRecord',
    'Logger',
    'MultiError',
    'RingBuffer',
    'async_handler',
    'capture_logging',
    'configure_console',
    'console_handler',
    'deprecated',
    'error_for_each',
    'error_from_list',
    'error_info',
    'find_cause_by_name',
    'for_logger',
    'from_level',
    'full_stack',
    'get_logger',
    'has_cause_with_name',
    'level_name',
    'measure',
    'parse_level',
    'register_log_handler',
    'reset_loggers',
    'ring_buffer',
    'trace',
    'unregister_log_handler',
]

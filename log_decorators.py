#!/usr/bin/env python3
"""
🔹 Log Decorators Module 🔹

Tracing, performance measurement and deprecation warnings built on the
Logger API.

Features:
    • trace: logs every call, result and error at trace level
    • measure: logs the duration of every call at performance level
    • deprecated: warns on the first call and at most once per interval after
    • Zero overhead beyond one level check when the level is disabled
    • Handles both sync and async functions
"""

import functools
import inspect
import math
import time
from typing import Any, Callable, Dict, Optional, Sequence

from error_chain import DecoratorUsageError
from informant_config import settings
from performance_tracker import performance
from text_format import Inspector, describe_error, simple_inspect

Hook = Optional[Callable[..., Any]]

# =============================================================================
# Generic Wrapper
# =============================================================================
def instrument(
    func: Callable,
    enabled: Callable[[], bool],
    on_enter: Hook = None,
    on_return: Hook = None,
    on_throw: Hook = None,
    on_exit: Hook = None,
) -> Callable:
    """
    Wrap func with hooks that only run while ``enabled()`` is true.

    Args:
        func: The function to wrap; coroutine functions get an async wrapper.
        enabled: Checked first on every call. When false, func is called
            directly and no hook runs.
        on_enter: ``on_enter(args, kwargs) -> state``, before the call.
        on_return: ``on_return(state, result)``, after a successful call.
        on_throw: ``on_throw(state, err)``, before the error is re-raised.
        on_exit: ``on_exit(state)``, always, after the call.

    Returns:
        Callable: The wrapped function.
    """
    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            if not enabled():
                return await func(*args, **kwargs)
            state = on_enter(args, kwargs) if on_enter else None
            try:
                result = await func(*args, **kwargs)
            except Exception as err:
                if on_throw:
                    on_throw(state, err)
                raise
            finally:
                if on_exit:
                    on_exit(state)
            if on_return:
                on_return(state, result)
            return result
        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not enabled():
            return func(*args, **kwargs)
        state = on_enter(args, kwargs) if on_enter else None
        try:
            result = func(*args, **kwargs)
        except Exception as err:
            if on_throw:
                on_throw(state, err)
            raise
        finally:
            if on_exit:
                on_exit(state)
        if on_return:
            on_return(state, result)
        return result
    return wrapper

def call_signature(name: str, args: Sequence[Any], kwargs: Dict[str, Any], inspector: Inspector) -> str:
    """Render a call as ``name(arg, ..., key=value)``."""
    parts = [inspector(arg) for arg in args]
    parts.extend(f"{key}={inspector(value)}" for key, value in kwargs.items())
    return f"{name}({', '.join(parts)})"

# =============================================================================
# Wrappers
# =============================================================================
def trace_wrap(logger, name: str, func: Callable, inspector: Optional[Inspector] = None, skip_first: bool = False) -> Callable:
    """
    Trace all calls to func, only if trace level is enabled for the logger.

    Logs ``name(args)`` on entry, then ``RETURNS <result>`` or
    ``THROWS <error>``; errors are re-raised.

    Args:
        logger: The Logger to log to.
        name: The name under which to log the calls.
        func: The function to wrap.
        inspector: Renders arguments and results; defaults to repr.
        skip_first: Leave the first argument (self or cls) out of the log.
    """
    render = inspector or simple_inspect

    def on_enter(args, kwargs):
        logger.trace(call_signature(name, args[1:] if skip_first else args, kwargs, render))

    def on_return(state, result):
        logger.trace("RETURNS", render(result))

    def on_throw(state, err):
        logger.trace(err, "THROWS", describe_error(err))

    return instrument(func, lambda: logger.trace(), on_enter=on_enter, on_return=on_return, on_throw=on_throw)

def measure_wrap(logger, name: str, func: Callable, inspector: Optional[Inspector] = None, skip_first: bool = False) -> Callable:
    """
    Measure all calls to func, only if performance level is enabled for the logger.

    Every call logs one performance record with the details ``duration`` (ms),
    ``startTime`` (epoch seconds) and ``name``, and the message
    ``<name(args)> -\\t<duration>ms``. Statistics are kept per ``name``.
    """
    render = inspector or simple_inspect

    def on_enter(args, kwargs):
        key = call_signature(name, args[1:] if skip_first else args, kwargs, render)
        return key, performance.start(name)

    def on_exit(state):
        key, timer = state
        timing = performance.stop(timer)
        if timing is not None:
            logger.performance(
                {"duration": timing.duration_ms, "startTime": timing.start_time, "name": key},
                f"{key} -\t{timing.duration_ms:.3f}ms",
            )

    return instrument(func, lambda: logger.performance(), on_enter=on_enter, on_exit=on_exit)

def deprecated_wrap(logger, name: str, func: Callable, instruction: str = "", interval: Optional[float] = None) -> Callable:
    """
    Warn that func is deprecated on the first call, and then at most once per
    interval (default: the configured deprecation interval of one second).
    The call is always delegated to func.
    """
    message = f"{name} is deprecated."
    if instruction:
        message = f"{message} {instruction}"
    silence_until = -math.inf

    @functools.wraps(func)
    def deprecated_wrapper(*args, **kwargs):
        nonlocal silence_until
        now = time.monotonic()
        if now >= silence_until:
            logger.warning(message)
            silence_until = now + (settings.deprecation_interval if interval is None else interval)
        return func(*args, **kwargs)
    return deprecated_wrapper

# =============================================================================
# Decorators
# =============================================================================
def method_name(func: Callable, instance: bool = False) -> str:
    """
    The qualified name of a function, without the scope it was defined in.

    Instance methods are named ``Class#method``; static and class methods
    and plain functions keep their dotted name, e.g. ``Class.method``.
    """
    name = func.__qualname__.rpartition("<locals>.")[2]
    if instance:
        owner, _, attr = name.rpartition(".")
        if owner:
            return f"{owner}#{attr}"
    return name

def _bound_parameter(func: Callable) -> Optional[str]:
    # "self" or "cls" for functions defined in a class body taking it first.
    scopes = func.__qualname__.split(".")
    if len(scopes) < 2 or scopes[-2] == "<locals>":
        return None
    params = list(inspect.signature(func).parameters)
    return params[0] if params and params[0] in ("self", "cls") else None

def _decorate(decorator_name: str, target: Any, wrap: Callable[[Callable, str, bool], Callable]) -> Any:
    if isinstance(target, (staticmethod, classmethod)):
        kind = type(target)
        func = target.__func__
        return kind(wrap(func, method_name(func), kind is classmethod))
    if not inspect.isfunction(target):
        raise DecoratorUsageError(f"@{decorator_name}() can only be used on method.")
    bound = _bound_parameter(target)
    return wrap(target, method_name(target, instance=bound == "self"), bound is not None)

def trace(logger, inspector: Optional[Inspector] = None) -> Callable[[Any], Any]:
    """
    Method decorator that traces all calls to the method, only if trace level
    is enabled for the given logger.

    Usage:
        class Repository:
            @trace(logger)
            def load(self, key): ...
    """
    def decorator(target):
        return _decorate(
            "trace", target,
            lambda func, name, skip_first: trace_wrap(logger, name, func, inspector, skip_first),
        )
    return decorator

def measure(logger, inspector: Optional[Inspector] = None) -> Callable[[Any], Any]:
    """Method decorator that measures all calls to the method at performance level."""
    def decorator(target):
        return _decorate(
            "measure", target,
            lambda func, name, skip_first: measure_wrap(logger, name, func, inspector, skip_first),
        )
    return decorator

def deprecated(logger, instruction: str = "") -> Callable[[Any], Any]:
    """
    Method decorator that warns on the first call that the method is deprecated.

    Args:
        logger: The Logger that should be used for the warning.
        instruction: An optional instruction to include in the message.
    """
    def decorator(target):
        return _decorate(
            "deprecated", target,
            lambda func, name, skip_first: deprecated_wrap(logger, name, func, instruction),
        )
    return decorator

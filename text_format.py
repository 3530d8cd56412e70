"""
Message formatting helpers shared by log records and errors.

Formatting follows printf-style substitution:

    >>> format_message("Encountered %s with %d legs", "a human", 3)
    'Encountered a human with 3 legs'
    >>> format_message("a message with", "other stuff")
    'a message with other stuff'
"""

import json
import math
import re
from typing import Any, Callable, Iterator

Inspector = Callable[[Any], str]

_DIRECTIVE = re.compile(r"%[sdifjoO%]")


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _as_number(value: Any, integer: bool) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return "NaN"
    if not integer:
        return str(float(value))
    return str(int(value)) if math.isfinite(value) else str(value)


def _substitute(directive: str, value: Any) -> str:
    if directive == "%s":
        return _as_text(value)
    if directive in ("%d", "%i"):
        return _as_number(value, integer=True)
    if directive == "%f":
        return _as_number(value, integer=False)
    if directive == "%j":
        try:
            return json.dumps(value, default=str)
        except ValueError:
            return "[Circular]"
    return repr(value)


def format_message(*args: Any) -> str:
    """
    Format a message from a format string and parameters.

    Supported directives are %s, %d, %i, %f, %j (JSON), %o/%O (repr) and %%.
    Directives without a matching parameter are kept as-is and parameters
    without a directive are appended, separated by spaces. When the first
    argument is not a string, all arguments are simply space-joined.
    """
    if not args:
        return ""
    fmt, params = args[0], args[1:]
    if not isinstance(fmt, str):
        return " ".join(_as_text(arg) for arg in args)
    if not params:
        return fmt

    remaining: Iterator[Any] = iter(params)
    consumed = 0

    def replace(match: "re.Match[str]") -> str:
        nonlocal consumed
        directive = match.group(0)
        if directive == "%%":
            return "%"
        if consumed >= len(params):
            return directive
        consumed += 1
        return _substitute(directive, next(remaining))

    message = _DIRECTIVE.sub(replace, fmt)
    rest = [_as_text(param) for param in remaining]
    return " ".join([message, *rest]) if rest else message


def simple_inspect(value: Any) -> str:
    """Default inspector used to render call arguments and results."""
    return repr(value)


def error_name(err: BaseException) -> str:
    """The name of an error, which is the name of its concrete class."""
    return type(err).__name__


def describe_error(err: BaseException) -> str:
    """The string form of an error, ``"<Name>: <message>"``."""
    message = str(err)
    return f"{error_name(err)}: {message}" if message else error_name(err)

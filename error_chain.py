#!/usr/bin/env python3
"""
🔹 Error Chain Module 🔹

Exceptions that carry a cause, structured info and a full multi-line stack
across the whole cause chain.

Features:
    • BaseError with the (cause?, info?, message, *params) signature
    • Aggregated info over the cause chain (outer keys override inner ones)
    • Full stack rendering with "caused by: " markers for every link
    • MultiError aggregation of several errors into one
    • Helpers that work on any exception, including native ``raise ... from``
"""

import reprlib
import traceback
from typing import Any, Callable, Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from text_format import describe_error, format_message

InfoObject = Mapping[str, Any]

# =============================================================================
# Exceptions
# =============================================================================
class InformantError(Exception):
    """Base exception class for informant usage errors."""
    pass

class InvalidNameError(InformantError, ValueError):
    """Exception raised when a logger path contains an empty name."""
    pass

class InvalidConstructionError(InformantError, TypeError):
    """Exception raised when a BaseError is constructed with arguments that cannot be disambiguated."""
    pass

class DecoratorUsageError(InformantError, TypeError):
    """Exception raised when a method decorator is applied to something that is not a method."""
    pass

# =============================================================================
# Argument Parsing
# =============================================================================
class ErrorArgs(NamedTuple):
    """The constructor arguments of a BaseError, sorted into their slots."""
    cause: Optional[BaseException]
    info: Optional[InfoObject]
    message: str
    params: Tuple[Any, ...]

def parse_error_args(args: Sequence[Any]) -> ErrorArgs:
    """
    Sort BaseError constructor arguments into cause, info, message and params.

    Everything before the first string is an option: one option is either a
    cause (an exception) or an info mapping, two options are cause and info in
    that order. Either option may be None.

    Args:
        args: The positional arguments passed to the constructor.

    Returns:
        ErrorArgs: The parsed arguments.

    Raises:
        InvalidConstructionError: If there is no message string, more than two
            options precede it, or an option has the wrong type.
    """
    option_count = next((i for i, arg in enumerate(args) if isinstance(arg, str)), -1)
    if option_count < 0 or option_count > 2:
        raise InvalidConstructionError(
            f"Invalid use of BaseError signature, got: {reprlib.repr(tuple(args))}"
        )

    cause, info = None, None
    if option_count == 1:
        if isinstance(args[0], BaseException):
            cause = args[0]
        else:
            info = args[0]
    elif option_count == 2:
        cause, info = args[0], args[1]

    if cause is not None and not isinstance(cause, BaseException):
        raise InvalidConstructionError(f"BaseError cause must be an exception, got: {reprlib.repr(cause)}")
    if info is not None and not isinstance(info, Mapping):
        raise InvalidConstructionError(f"BaseError info must be a mapping, got: {reprlib.repr(info)}")

    return ErrorArgs(cause, info, args[option_count], tuple(args[option_count + 1:]))

# =============================================================================
# Error Types
# =============================================================================
class BaseError(Exception):
    """
    Base class for errors with a cause and structured info.

    Usage:
        BaseError("message %s", "with params")
        BaseError(cause, "message")
        BaseError({"request_id": 123}, "message")
        BaseError(cause, {"request_id": 123}, "message")

    The message of the cause is appended to the own message, separated by ": ".
    """

    def __init__(self, *args: Any):
        parsed = parse_error_args(args)
        message = format_message(parsed.message, *parsed.params)
        if parsed.cause is not None and str(parsed.cause):
            message = f"{message}: {parsed.cause}"
        super().__init__(message)
        self.message = message
        self._cause = parsed.cause
        self._info: Dict[str, Any] = dict(parsed.info or {})
        self._stack: List[str] = traceback.format_stack()[:-1]
        self.__cause__ = parsed.cause

    @property
    def name(self) -> str:
        """The name of the error always equals the name of its class."""
        return type(self).__name__

    def cause(self) -> Optional[BaseException]:
        """The direct cause of this error, if any."""
        return self._cause

    def info(self) -> Dict[str, Any]:
        """Own info merged on top of the info of the whole cause chain."""
        merged = error_info(self._cause) if self._cause is not None else {}
        merged.update(self._info)
        return merged

    def full_stack(self) -> str:
        """The stack of this error followed by the full stacks of all causes."""
        return full_stack(self)

    def find_cause_by_name(self, name: str) -> Optional[BaseException]:
        """The first error in the cause chain (starting with self) with the given name."""
        return find_cause_by_name(self, name)

    def has_cause_with_name(self, name: str) -> bool:
        """Whether any error in the cause chain (starting with self) has the given name."""
        return has_cause_with_name(self, name)

class MultiError(BaseError):
    """
    Aggregates multiple errors into one.

    The first error is the cause, and the info of all errors is merged with
    later errors overriding earlier ones.
    """

    def __init__(self, errors: Sequence[BaseException]):
        errors = tuple(errors)
        if not errors:
            raise InvalidConstructionError("MultiError requires at least one error")
        count = len(errors)
        super().__init__(errors[0], "first of %d error%s", count, "" if count == 1 else "s")
        self._errors = errors

    def errors(self) -> Tuple[BaseException, ...]:
        """All aggregated errors, in their original order."""
        return self._errors

    def info(self) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for err in self._errors:
            merged.update(error_info(err))
        merged.update(self._info)
        return merged

# =============================================================================
# Chain Helpers
# =============================================================================
def error_cause(err: BaseException) -> Optional[BaseException]:
    """The cause of any error: ``cause()`` for a BaseError, ``__cause__`` otherwise."""
    if isinstance(err, BaseError):
        return err.cause()
    return err.__cause__

def iter_cause_chain(err: BaseException) -> Iterator[BaseException]:
    """Walk from the given error to its root cause, stopping on cycles."""
    seen = set()
    current: Optional[BaseException] = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = error_cause(current)

def error_info(err: BaseException) -> Dict[str, Any]:
    """The merged info of an error and its causes; empty for errors without info."""
    if isinstance(err, BaseError):
        return err.info()
    for link in iter_cause_chain(err):
        if isinstance(link, BaseError):
            return link.info()
    return {}

def error_stack(err: BaseException) -> str:
    """
    The stack of a single error: its string form followed by its frames.

    Raised errors use their traceback; BaseErrors that were never raised use
    the stack captured when they were constructed.
    """
    if err.__traceback__ is not None:
        frames = traceback.format_tb(err.__traceback__)
    else:
        frames = getattr(err, "_stack", [])
    return describe_error(err) + "\n" + "".join(frames)

def full_stack(err: BaseException) -> str:
    """The stacks of all errors in the cause chain, joined with "caused by: "."""
    return "\ncaused by: ".join(error_stack(link).rstrip("\n") for link in iter_cause_chain(err))

def find_cause_by_name(err: BaseException, name: str) -> Optional[BaseException]:
    """The first error in the cause chain (starting with err) with the given name."""
    for link in iter_cause_chain(err):
        if type(link).__name__ == name:
            return link
    return None

def has_cause_with_name(err: BaseException, name: str) -> bool:
    """Whether any error in the cause chain (starting with err) has the given name."""
    return find_cause_by_name(err, name) is not None

def error_for_each(err: BaseException, callback: Callable[[BaseException], Any]) -> None:
    """Call back once per aggregated error of a MultiError, or once with any other error."""
    if isinstance(err, MultiError):
        for member in err.errors():
            callback(member)
    else:
        callback(err)

def error_from_list(errors: Sequence[BaseException]) -> Optional[BaseException]:
    """
    Convert a list of errors into a single error.

    Returns:
        None for an empty list, the error itself for a single error, and a
        MultiError for anything longer.
    """
    if not errors:
        return None
    if len(errors) == 1:
        return errors[0]
    return MultiError(errors)

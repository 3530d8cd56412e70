"""
The LogRecord is constructed on every log statement whose level is enabled.
The same LogRecord instance is passed to all registered log handlers.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import text_format
from log_levels import Level


def _freeze(details: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if details is None or isinstance(details, MappingProxyType):
        return details
    return MappingProxyType(dict(details))


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable snapshot of one accepted log event.

    Attributes:
        logger: The name of the Logger that constructed the record.
        level: The level on which the message was logged.
        time: The (UTC) time of logging.
        details: Optional read-only mapping with structured information about the event.
        fmt: The format string (or first message part) passed to the log method.
        params: The remaining message parts.
    """

    logger: str
    level: Level
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    details: Optional[Mapping[str, Any]] = None
    fmt: Any = ""
    params: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", _freeze(self.details))
        object.__setattr__(self, "params", tuple(self.params))

    @cached_property
    def message(self) -> str:
        """The formatted message; formatted on first access only."""
        if not self.params and isinstance(self.fmt, str):
            return self.fmt
        return text_format.format_message(self.fmt, *self.params)

    @property
    def iso_time(self) -> str:
        """The time as ISO-8601 with millisecond precision and a "Z" suffix."""
        return self.time.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def as_dict(self) -> Dict[str, Any]:
        """A JSON-friendly representation of the record."""
        return {
            "logger": self.logger,
            "level": int(self.level),
            "time": self.iso_time,
            "details": dict(self.details) if self.details is not None else None,
            "message": self.message,
        }

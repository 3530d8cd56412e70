"""
Log levels supported by informant.

Ranks are spaced 100 apart so that callers can offset a threshold by one step
(``level + 100``) without colliding with an adjacent level.
"""

import math
from enum import IntEnum
from typing import List, Union

Level = Union[int, float]


class LogLevel(IntEnum):
    """The LogLevels that are supported by informant, in order of ascending gravity."""

    #: Maximum level in low-level libraries, rarely enabled during runtime.
    TRACE = 100
    #: Insight in state or events while debugging (in production). Disabled by default.
    DEBUG = 200
    #: Performance measurements, to diagnose performance issues in production.
    PERFORMANCE = 300
    #: Default level for new loggers; info messages are likely to be recorded.
    INFO = 400
    #: An issue that needs to be addressed by a developer sometime.
    WARNING = 500
    #: An issue that needs to be addressed asap.
    ERROR = 600


LEVELS: List[LogLevel] = sorted(LogLevel)

#: Set a Logger to this to log absolutely everything.
LOG_EVERYTHING: float = -math.inf

#: Use this as level to turn off a logger.
LOG_NOTHING: float = math.inf

_SENTINELS = {"everything": LOG_EVERYTHING, "nothing": LOG_NOTHING}


def level_name(level: Level) -> str:
    """
    Return the canonical upper-case name for a level or rank.

    Ranks between two members are named after the member just below them.
    """
    if level == LOG_EVERYTHING:
        return "EVERYTHING"
    if level == LOG_NOTHING:
        return "NOTHING"
    name = "EVERYTHING"
    for member in LEVELS:
        if member <= level:
            name = member.name
    return name


def parse_level(value: Union[Level, str]) -> Level:
    """
    Convert a level given as LogLevel, rank or name into a comparable rank.

    Args:
        value: A LogLevel, an int/float rank, or a case-insensitive level name
            (including "everything" and "nothing").

    Returns:
        The matching LogLevel member, or the plain rank when it is not a member.

    Raises:
        ValueError: If a name does not match any level.
    """
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _SENTINELS:
            return _SENTINELS[key]
        try:
            return LogLevel[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Unknown log level: {value!r}")
    try:
        return LogLevel(value)
    except ValueError:
        return value

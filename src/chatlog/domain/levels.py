from __future__ import annotations

"""
Severity Levels and Log Records.

Defines the ordered level enumeration used by the emit filter and the
ephemeral record built for every accepted call.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from chatlog.domain.constants import TIMESTAMP_FMT


class Level(Enum):
    """Ordered severity levels. Comparison is by ``priority``."""
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @property
    def priority(self) -> int:
        return self.value

    @property
    def stdlib_level(self) -> int:
        """Matching numeric level of the standard ``logging`` module."""
        return _STDLIB_LEVELS[self]

    @classmethod
    def parse(cls, raw: object) -> "Level":
        """
        Resolve a level from its name, priority or an existing member.

        Accepts ``"warn"``, ``"WARNING"``, ``2`` or ``Level.WARN``.

        Raises:
            ValueError: If the input matches no level.
        """
        if isinstance(raw, Level):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cls(raw)
        name = str(raw).strip().upper()
        name = _ALIASES.get(name, name)
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {raw!r}") from None


_STDLIB_LEVELS = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.FATAL: logging.CRITICAL,
}

_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}


def render_message(tag: Optional[str], message: str) -> str:
    """Join tag and message the way every sink displays them."""
    if tag is not None:
        return f"{tag}: {message}"
    return message


def format_timestamp(moment: datetime) -> str:
    """Format a datetime with millisecond precision."""
    return f"{moment.strftime(TIMESTAMP_FMT)}.{moment.microsecond // 1000:03d}"


@dataclass(frozen=True)
class LogRecord:
    """
    A single accepted log call.

    Never persisted as a structure: only ``to_line`` output reaches disk.

    Attributes:
        timestamp: Moment the record was built (UTC).
        level: Severity of the call.
        message: Caller supplied text.
        tag: Optional component tag.
        error: Optional exception associated with the call.
    """
    timestamp: datetime
    level: Level
    message: str
    tag: Optional[str] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def rendered(self) -> str:
        return render_message(self.tag, self.message)

    def to_line(self) -> str:
        """Render the newline-terminated line persisted to the day file."""
        return f"{format_timestamp(self.timestamp)} {self.level.name} {self.tag or ''}: {self.message}\n"

from __future__ import annotations

"""
Platform Logger.

The OS-level channel every accepted line is mirrored to. In Python that
channel is the standard ``logging`` tree: lines go to a named logger with
the caller's exception attached so handlers render the native traceback.
"""

import logging
from typing import Optional, Protocol

from chatlog.domain.constants import PLATFORM_TAG
from chatlog.domain.levels import Level, render_message


class PlatformLogger(Protocol):
    """Receives every accepted line at its level."""

    def log(
            self,
            level: Level,
            tag: Optional[str],
            message: str,
            error: Optional[BaseException] = None,
    ) -> None:
        ...


class StdlibPlatformLogger:
    """
    Mirrors lines into the stdlib logger named ``channel``.

    The text passed to ``logging`` is the same ``"{tag}: {message}"``
    rendering that reaches the day file.
    """

    def __init__(self, channel: str = PLATFORM_TAG) -> None:
        self.channel = channel
        self._logger = logging.getLogger(channel)

    def log(
            self,
            level: Level,
            tag: Optional[str],
            message: str,
            error: Optional[BaseException] = None,
    ) -> None:
        exc_info = (type(error), error, error.__traceback__) if error is not None else None
        self._logger.log(level.stdlib_level, render_message(tag, message), exc_info=exc_info)

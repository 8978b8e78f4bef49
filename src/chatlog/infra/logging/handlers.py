from __future__ import annotations

"""
Logging Handlers and Low-Level Utilities.

Provides handler factories and the tagging mechanism that lets the
library tell its own handlers apart from ones installed by the host.
"""

import logging
import sys
from typing import IO, Optional

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_chatlog_handler"


def _tag_handler(handler: logging.Handler) -> None:
    """Mark a handler as managed by chatlog."""
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """True if the handler carries our internal tag."""
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_console_handler(
        level_int: int,
        formatter: logging.Formatter,
        stream: Optional[IO[str]] = None,
) -> logging.StreamHandler:
    """
    Initialize a tagged stderr handler.

    Args:
        level_int: Numeric logging level.
        formatter: Pre-configured logging formatter.
        stream: Target stream, stderr by default.

    Returns:
        logging.StreamHandler: Configured handler.
    """
    sh = logging.StreamHandler(stream or sys.stderr)
    sh.setLevel(level_int)
    sh.setFormatter(formatter)
    _tag_handler(sh)
    return sh

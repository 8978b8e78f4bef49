from __future__ import annotations

"""
Exception hierarchy for the logging facility.

File I/O failures never surface through these classes: they are absorbed
by the store. Only configuration validation and deliberate fault injection
raise to the caller.
"""


class ChatLogError(Exception):
    """Base class for errors raised by chatlog."""


class ConfigError(ChatLogError):
    """Raised by strict settings validation when a value is unusable."""


class ManualCrashError(ChatLogError):
    """Default fault raised by ``AppLogger.crash`` and ``throw_exception``."""

    def __init__(self, message: str = "manual crash") -> None:
        super().__init__(message)

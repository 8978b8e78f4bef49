from __future__ import annotations

"""
Logging Configuration Models.

Defines the settings used to route the platform channel (the stdlib
``logging`` tree the emit pipeline mirrors into) to the console.
"""

import logging
from dataclasses import dataclass
from typing import Dict

# Mapping of string identifiers to native logging constants
_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the platform channel initialization.

    Attributes:
        level: Minimum severity level forwarded to the console.
        console: Flag to enable stderr stream output.
        console_fmt: Structural format for terminal output.
        datefmt: Chronological format for timestamp generation.
    """
    level: str = "INFO"
    console: bool = True

    console_fmt: str = "%(asctime)s %(levelname).1s/%(name)s: %(message)s"
    datefmt: str = "%H:%M:%S"

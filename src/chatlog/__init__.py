from __future__ import annotations

"""
chatlog: application-level logging for the chat client.

Exposes the emit pipeline, the daily log store and the collaborator
implementations used to wire them together.
"""

from chatlog.core.crash import (
    CrashReporter,
    HttpCrashReporter,
    MemoryCrashReporter,
    NullCrashReporter,
)
from chatlog.core.disk import DiskSpaceMonitor, LoggingDiskSpaceMonitor
from chatlog.core.logger import AppLogger
from chatlog.core.platform_logger import PlatformLogger, StdlibPlatformLogger
from chatlog.core.store import LogStore
from chatlog.domain.config import LogSettings, load_settings
from chatlog.domain.device import (
    AccountSlot,
    DeviceInfo,
    StaticAccountProvider,
    collect_device_info,
)
from chatlog.domain.levels import Level, LogRecord
from chatlog.exceptions import ChatLogError, ConfigError, ManualCrashError

__version__ = "1.0.0"

__all__ = [
    "AccountSlot",
    "AppLogger",
    "ChatLogError",
    "ConfigError",
    "CrashReporter",
    "DeviceInfo",
    "DiskSpaceMonitor",
    "HttpCrashReporter",
    "Level",
    "LogRecord",
    "LogSettings",
    "LogStore",
    "LoggingDiskSpaceMonitor",
    "ManualCrashError",
    "MemoryCrashReporter",
    "NullCrashReporter",
    "PlatformLogger",
    "StaticAccountProvider",
    "StdlibPlatformLogger",
    "collect_device_info",
    "load_settings",
]

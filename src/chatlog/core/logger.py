from __future__ import annotations

"""
Emit Pipeline.

``AppLogger`` is the entry point the host application calls. Each call is
filtered by the enabled flag, the minimum level and the ``{rc}`` noise
rule, mirrored to the platform logger, forwarded to the crash reporter for
warnings and above, and finally queued for the day file. Nothing in this
path waits on disk I/O.
"""

import logging
import traceback
from typing import Any, Callable, Iterable, Optional, Union

from chatlog.core.crash import CrashReporter, HttpCrashReporter, NullCrashReporter
from chatlog.core.disk import DiskSpaceMonitor
from chatlog.core.platform_logger import PlatformLogger, StdlibPlatformLogger
from chatlog.core.store import Clock, LogStore
from chatlog.domain.config import LogSettings
from chatlog.domain.constants import NATIVE_TAG, PLATFORM_TAG, RC_MARKER
from chatlog.domain.device import AccountSlot, DeviceInfo, collect_device_info
from chatlog.domain.levels import Level, render_message
from chatlog.exceptions import ManualCrashError
from chatlog.infra.fs import is_storage_exhausted

logger = logging.getLogger(__name__)

MessageOrError = Union[str, BaseException]

# Native level codes 0..3
_NATIVE_LEVELS = {
    0: Level.DEBUG,
    1: Level.INFO,
    2: Level.WARN,
    3: Level.ERROR,
}


def format_stack_trace(error: BaseException) -> str:
    """Full traceback text of ``error``, without the trailing newline."""
    return "".join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip("\n")


class AppLogger:
    """
    Level-filtered logger mirroring to the platform channel, the crash
    reporter and the daily log file.

    Args:
        store: Destination of the persisted lines.
        platform: OS-level channel. Defaults to the stdlib ``Nnngram`` logger.
        crash_reporter: Breadcrumb and exception collector.
    """

    def __init__(
            self,
            store: LogStore,
            platform: Optional[PlatformLogger] = None,
            crash_reporter: Optional[CrashReporter] = None,
    ) -> None:
        self.store = store
        self.settings: LogSettings = store.settings
        self.platform: PlatformLogger = platform or StdlibPlatformLogger(PLATFORM_TAG)
        self.crash_reporter: CrashReporter = crash_reporter or NullCrashReporter()
        self.native_platform: PlatformLogger = StdlibPlatformLogger(NATIVE_TAG)

    @classmethod
    def create(
            cls,
            settings: Optional[LogSettings] = None,
            *,
            device: Optional[DeviceInfo] = None,
            accounts: Optional[Iterable[AccountSlot]] = None,
            platform: Optional[PlatformLogger] = None,
            crash_reporter: Optional[CrashReporter] = None,
            disk_monitor: Optional[DiskSpaceMonitor] = None,
            clock: Optional[Clock] = None,
            start: bool = True,
    ) -> "AppLogger":
        """
        Wire a logger and its store from settings.

        An ``HttpCrashReporter`` is used when the settings name a crash
        endpoint and no reporter is passed explicitly.
        """
        settings = settings or LogSettings()
        device = device or collect_device_info()
        if crash_reporter is None and settings.crash_endpoint:
            crash_reporter = HttpCrashReporter(settings.crash_endpoint, device=device)

        store = LogStore(
            settings,
            device=device,
            accounts=accounts,
            disk_monitor=disk_monitor,
            clock=clock,
        )
        app_logger = cls(store, platform=platform, crash_reporter=crash_reporter)
        if start:
            app_logger.start()
        return app_logger

    def start(self) -> None:
        """
        Initialize the store. Failures are reported through the pipeline
        instead of raised.
        """
        try:
            self.store.start()
        except OSError as e:
            if is_storage_exhausted(e):
                self.store.notify_low_disk()
            self.error("Logger crashes", error=e)

    def shutdown(self, wait: bool = True) -> None:
        """Drain pending writes and stop the background workers."""
        self.store.shutdown(wait=wait)
        stop = getattr(self.crash_reporter, "shutdown", None)
        if callable(stop):
            stop(wait=wait)

    # -------------------------------------------------------------------------
    # PIPELINE
    # -------------------------------------------------------------------------

    def log(
            self,
            level: Level,
            tag: Optional[str],
            message: str,
            error: Optional[BaseException] = None,
    ) -> bool:
        """
        Emit one line.

        Args:
            level: Severity of the call.
            tag: Optional component tag.
            message: Line text.
            error: Exception to attach; its traceback is also persisted.

        Returns:
            bool: False if the call was filtered out.
        """
        if not self.settings.accepts(level):
            return False
        if RC_MARKER in message and not self.settings.enable_rc_log:
            return False

        rendered = render_message(tag, message)
        self.platform.log(level, tag, message, error)

        if level is Level.WARN:
            self.crash_reporter.log_breadcrumb(rendered)
        elif level in (Level.ERROR, Level.FATAL):
            self.crash_reporter.log_breadcrumb(rendered)
            if error is not None:
                self.crash_reporter.record_exception(error)

        timestamp = self.store.clock()
        self.store.schedule_append(level, tag, message, timestamp)
        if error is not None:
            self.store.schedule_append(level, tag, format_stack_trace(error), timestamp)
        return True

    def _leveled(
            self,
            level: Level,
            message: MessageOrError,
            tag: Optional[str],
            error: Optional[BaseException],
    ) -> bool:
        # An exception passed in place of the message logs with an empty text
        if isinstance(message, BaseException):
            return self.log(level, tag, "", message)
        return self.log(level, tag, message, error)

    def debug(self, message: MessageOrError, tag: Optional[str] = None,
              error: Optional[BaseException] = None) -> bool:
        return self._leveled(Level.DEBUG, message, tag, error)

    def info(self, message: MessageOrError, tag: Optional[str] = None,
             error: Optional[BaseException] = None) -> bool:
        return self._leveled(Level.INFO, message, tag, error)

    def warn(self, message: MessageOrError, tag: Optional[str] = None,
             error: Optional[BaseException] = None) -> bool:
        return self._leveled(Level.WARN, message, tag, error)

    def error(self, message: MessageOrError, tag: Optional[str] = None,
              error: Optional[BaseException] = None) -> bool:
        return self._leveled(Level.ERROR, message, tag, error)

    def fatal(self, error: Optional[BaseException]) -> bool:
        """Log ``error`` at FATAL with an empty message; ignores None."""
        if error is None:
            return False
        return self.log(Level.FATAL, None, "", error)

    d = debug
    i = info
    w = warn
    e = error

    # -------------------------------------------------------------------------
    # NATIVE PASSTHROUGH
    # -------------------------------------------------------------------------

    def native_log(self, level_code: int, tag: str, message: str) -> None:
        """
        Relay a line from the native networking layer.

        Lines tagged with the application channel are re-emitted through the
        pipeline under ``tgnet``; every line is mirrored to the ``tgnet``
        platform channel.
        """
        if not self.settings.logs_enabled or not self.settings.enable_native_log:
            return
        level = _NATIVE_LEVELS.get(level_code)
        if level is None:
            return
        if tag == PLATFORM_TAG:
            self.log(level, NATIVE_TAG, message)
        self.native_platform.log(level, tag, message)

    # -------------------------------------------------------------------------
    # MANUAL CONTROLS
    # -------------------------------------------------------------------------

    def set_minimum_log_level(self, level: Level) -> None:
        self.settings.set_minimum_level(level)

    def refresh_log(self) -> bool:
        return self.store.refresh_log()

    def share_log(self, share_target: Callable[[str], Any]) -> bool:
        return self.store.share_log(share_target)

    def crash(self, error: Optional[BaseException] = None) -> None:
        """
        Raise ``error`` (or ``ManualCrashError``) when logging is enabled.

        Raises:
            BaseException: Always, unless logging is disabled.
        """
        if not self.settings.logs_enabled:
            return
        raise error if error is not None else ManualCrashError()

    def throw_exception(self) -> None:
        """Raise and catch a ``ManualCrashError``, logging it at WARN."""
        try:
            raise ManualCrashError()
        except ManualCrashError as e:
            self.warn(e)

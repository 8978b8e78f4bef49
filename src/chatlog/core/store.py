from __future__ import annotations

"""
Daily Log Store.

Owns the on-disk log files: one per UTC calendar day, named
``log-YYYY-MM-DD.txt``. Every freshly created file starts with a header
block describing the build, the device and the signed-in accounts,
followed by a session-start marker. A file that grows past the size
ceiling is truncated and restarted; files older than the retention window
are swept at startup.

All writes run on a dedicated single-worker executor, so submission order
is preserved and callers never wait for the disk. Appends and manual
refreshes serialize on the same re-entrant lock.
"""

import atexit
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, List, Optional

from chatlog.core.disk import DiskSpaceMonitor, LoggingDiskSpaceMonitor
from chatlog.domain.config import LogSettings
from chatlog.domain.constants import LOW_DISK_REQUIRED_SLACK, SESSION_MARKER_PREFIX
from chatlog.domain.device import AccountSlot, DeviceInfo, active_accounts, collect_device_info
from chatlog.domain.levels import Level, LogRecord, format_timestamp
from chatlog.infra.fs import (
    file_creation_time,
    file_size,
    is_storage_exhausted,
    list_dir_files,
    log_file_name,
)
from chatlog.infra.logging import get_recent_logs

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Lone surrogates (surrogateescape-decoded argv, file names) are escaped, not fatal
_ENCODING_ERRORS = "backslashreplace"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LogStore:
    """
    Append-only store of day-named log files.

    Args:
        settings: Shared runtime settings (enabled flag, size ceiling,
            retention window, directory).
        device: Build and host description for the header block.
        accounts: Account slots listed in the header block.
        disk_monitor: Notified when a write fails on a full disk.
        clock: Source of the current UTC time.
    """

    def __init__(
            self,
            settings: LogSettings,
            device: Optional[DeviceInfo] = None,
            accounts: Optional[Iterable[AccountSlot]] = None,
            disk_monitor: Optional[DiskSpaceMonitor] = None,
            clock: Optional[Clock] = None,
    ) -> None:
        self.settings = settings
        self.device = device or collect_device_info()
        self.accounts = accounts
        self.disk_monitor = disk_monitor or LoggingDiskSpaceMonitor(settings.logs_dir)
        self.clock: Clock = clock or utc_now

        self._lock = threading.RLock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="LogWriter")
        self._closed = False
        atexit.register(self.shutdown)

    # -------------------------------------------------------------------------
    # PATHS
    # -------------------------------------------------------------------------

    @property
    def logs_dir(self) -> str:
        return self.settings.logs_dir

    def active_path(self, at: Optional[datetime] = None) -> str:
        """
        Path of the day file for ``at`` (today when omitted).

        Re-derived on every call, so a process that outlives midnight starts
        writing the new day's file on its next append. Appends pass the
        record timestamp so a line always lands in the file of its own date.
        """
        return os.path.join(self.logs_dir, log_file_name(at or self.clock()))

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    def start(self) -> Optional[Future]:
        """
        Initialize the store for this process.

        Schedules the retention sweep, then (if logging is enabled) creates
        today's file with its header when missing and appends a
        session-start marker.

        Returns:
            Optional[Future]: Handle of the scheduled retention sweep.

        Raises:
            OSError: If the directory or today's file cannot be prepared.
        """
        os.makedirs(self.logs_dir, exist_ok=True)
        sweep = self.submit(self.purge_stale_files)

        if self.settings.logs_enabled:
            with self._lock:
                path = self.active_path()
                if not os.path.exists(path):
                    self.write_header(path)
                self._append_text(path, self.session_marker())

        logger.debug(f"LogStore started at {self.logs_dir}")
        return sweep

    def submit(self, fn: Callable[..., Any], *args: Any) -> Optional[Future]:
        """Queue work on the writer thread; dropped once the store is shut down."""
        if self._closed:
            return None
        try:
            return self._executor.submit(fn, *args)
        except RuntimeError:
            return None

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every write queued before this call has completed."""
        marker = self.submit(lambda: None)
        if marker is not None:
            marker.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work and, if ``wait``, drain the queue."""
        self._closed = True
        self._executor.shutdown(wait=wait)
        atexit.unregister(self.shutdown)

    # -------------------------------------------------------------------------
    # HEADER & MARKERS
    # -------------------------------------------------------------------------

    def header_text(self) -> str:
        """Descriptive block written at the top of every new file."""
        d = self.device
        lines = [
            f"Current version: {d.app_version}",
            f"Device Brand: {d.brand}",
            f"Device: {d.model}",
            f"Manufacturer: {d.manufacturer}",
            f"OS: {d.os_version}",
            f"ABI: {d.abi}",
        ]
        for slot in active_accounts(self.accounts):
            lines.append(f"User {slot.index}: {slot.user_id}")
        return "\n".join(lines) + "\n"

    def session_marker(self) -> str:
        return (
            f"{SESSION_MARKER_PREFIX}{format_timestamp(self.clock())}\n"
            f"Current version: {self.device.app_version}\n"
        )

    def write_header(self, path: str) -> None:
        """Create (or truncate) ``path`` with the header block as its only content."""
        with open(path, "w", encoding="utf-8", errors=_ENCODING_ERRORS) as f:
            f.write(self.header_text())

    # -------------------------------------------------------------------------
    # APPEND & ROTATION
    # -------------------------------------------------------------------------

    def schedule_append(
            self,
            level: Level,
            tag: Optional[str],
            message: str,
            timestamp: Optional[datetime] = None,
    ) -> Optional[Future]:
        """Queue ``append_line`` on the writer thread."""
        return self.submit(self.append_line, level, tag, message, timestamp)

    def append_line(
            self,
            level: Level,
            tag: Optional[str],
            message: str,
            timestamp: Optional[datetime] = None,
    ) -> bool:
        """
        Append one formatted line to today's file.

        Recreates a missing file and restarts an oversized one before
        writing. Never raises: I/O failures are absorbed, and a full disk
        is reported to the disk space monitor.

        Returns:
            bool: True if the line was written.
        """
        if not self.settings.logs_enabled:
            return False

        record = LogRecord(timestamp=timestamp or self.clock(), level=level, tag=tag, message=message)
        try:
            with self._lock:
                path = self.active_path(record.timestamp)
                size = file_size(path)
                if size is None:
                    os.makedirs(self.logs_dir, exist_ok=True)
                    self._reset_file(path)
                elif size > self.settings.max_file_size:
                    logger.debug(f"Rotating {os.path.basename(path)} at {size} bytes")
                    self._reset_file(path)
                self._append_text(path, record.to_line())
            return True
        except OSError as e:
            self._handle_io_failure(e)
            return False

    def refresh_log(self) -> bool:
        """
        Replace today's file with a fresh one (header and session marker).

        Holds the store lock for the whole delete and recreate, so no
        pending append can land in between.

        Returns:
            bool: True if the file was recreated.
        """
        try:
            with self._lock:
                os.makedirs(self.logs_dir, exist_ok=True)
                self._reset_file(self.active_path())
            return True
        except OSError as e:
            self._handle_io_failure(e)
            return False

    def _reset_file(self, path: str) -> None:
        if os.path.exists(path):
            os.remove(path)
        self.write_header(path)
        self._append_text(path, self.session_marker())

    def _append_text(self, path: str, text: str) -> None:
        with open(path, "a", encoding="utf-8", errors=_ENCODING_ERRORS) as f:
            f.write(text)

    def _handle_io_failure(self, exc: OSError) -> None:
        if is_storage_exhausted(exc):
            self.notify_low_disk()
        else:
            logger.debug(f"Dropped log write: {exc}")

    def notify_low_disk(self) -> None:
        self.disk_monitor.notify_low_disk(LOW_DISK_REQUIRED_SLACK)

    # -------------------------------------------------------------------------
    # RETENTION
    # -------------------------------------------------------------------------

    def purge_stale_files(self) -> List[str]:
        """
        Delete every file in the log directory created before the cutoff.

        A file created exactly at ``now - retention`` is kept. Files that
        cannot be inspected or deleted are skipped.

        Returns:
            List[str]: Paths that were removed.
        """
        cutoff = (self.clock() - timedelta(hours=self.settings.retention_hours)).timestamp()
        removed: List[str] = []
        for path in list_dir_files(self.logs_dir):
            try:
                if file_creation_time(path) < cutoff:
                    os.remove(path)
                    removed.append(path)
            except OSError as e:
                logger.debug(f"Retention sweep skipped {path}: {e}")
        if removed:
            logger.debug(f"Retention sweep removed {len(removed)} file(s)")
        return removed

    # -------------------------------------------------------------------------
    # READ ACCESS
    # -------------------------------------------------------------------------

    def share_log(self, share_target: Callable[[str], Any]) -> bool:
        """
        Hand today's file to a sharing collaborator if it exists.

        Returns:
            bool: True if the collaborator was called.
        """
        path = self.active_path()
        if not os.path.exists(path):
            return False
        share_target(path)
        return True

    def recent_lines(self, n_lines: int = 100) -> str:
        """Tail of today's file."""
        return get_recent_logs(self.active_path(), n_lines)

from __future__ import annotations

"""
Disk Space Monitor.

Notified by the store when a write fails because storage is exhausted.
The host application decides how to surface it; the default
implementation reports the remaining free space on the diagnostic logger.
"""

import logging
import shutil
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class DiskSpaceMonitor(Protocol):
    def notify_low_disk(self, required_slack: int) -> None:
        ...


class LoggingDiskSpaceMonitor:
    """Logs a warning with the free bytes left on the log volume."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self.notifications = 0

    def notify_low_disk(self, required_slack: int) -> None:
        self.notifications += 1
        free = self._free_bytes()
        if free is None:
            logger.warning(f"Storage exhausted while writing logs (required slack: {required_slack}).")
        else:
            logger.warning(
                f"Storage exhausted while writing logs: {free} bytes free "
                f"(required slack: {required_slack})."
            )

    def _free_bytes(self) -> Optional[int]:
        if not self.path:
            return None
        try:
            return shutil.disk_usage(self.path).free
        except OSError:
            return None

from __future__ import annotations

"""
Crash Reporter Collaborators.

Warning and error lines are forwarded as breadcrumbs; exceptions attached
to error and fatal calls are submitted as non-fatal reports. Submission
never blocks the emitting thread.
"""

import atexit
import logging
import threading
import traceback
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional, Protocol, Tuple

from chatlog.domain.device import DeviceInfo
from chatlog.infra import network

logger = logging.getLogger(__name__)

DEFAULT_BREADCRUMB_LIMIT = 64


class CrashReporter(Protocol):
    def log_breadcrumb(self, message: str) -> None:
        ...

    def record_exception(self, error: BaseException) -> None:
        ...


class NullCrashReporter:
    """Discards everything. Used when no backend is configured."""

    def log_breadcrumb(self, message: str) -> None:
        pass

    def record_exception(self, error: BaseException) -> None:
        pass


class MemoryCrashReporter:
    """Keeps breadcrumbs and exceptions in memory, for embedding hosts and tests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.breadcrumbs: List[str] = []
        self.exceptions: List[BaseException] = []

    def log_breadcrumb(self, message: str) -> None:
        with self._lock:
            self.breadcrumbs.append(message)

    def record_exception(self, error: BaseException) -> None:
        with self._lock:
            self.exceptions.append(error)


# -----------------------------------------------------------------------------
# REMOTE REPORTER
# -----------------------------------------------------------------------------

class HttpCrashReporter:
    """
    Posts exception reports as JSON to a collection endpoint.

    Breadcrumbs are kept in a bounded ring buffer and attached to the next
    report. Reports are delivered by a single background worker so the
    emitting thread only pays for building the payload.
    """

    def __init__(
            self,
            endpoint: str,
            device: Optional[DeviceInfo] = None,
            breadcrumb_limit: int = DEFAULT_BREADCRUMB_LIMIT,
    ) -> None:
        self.endpoint = endpoint
        self.device = device
        self._lock = threading.Lock()
        self._breadcrumbs: Deque[str] = deque(maxlen=breadcrumb_limit)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="CrashReporter")
        atexit.register(self.shutdown)

    @property
    def breadcrumbs(self) -> List[str]:
        with self._lock:
            return list(self._breadcrumbs)

    def log_breadcrumb(self, message: str) -> None:
        with self._lock:
            self._breadcrumbs.append(message)

    def record_exception(self, error: BaseException) -> Optional[Future]:
        payload = self.build_payload(error)
        try:
            return self._executor.submit(self._deliver, payload)
        except RuntimeError:
            # Executor already shut down during interpreter exit
            logger.debug("Crash reporter is shut down; dropping exception report.")
            return None

    def build_payload(self, error: BaseException) -> Dict[str, Any]:
        """Serialize an exception with the current breadcrumb trail."""
        payload: Dict[str, Any] = {
            "type": type(error).__name__,
            "message": str(error),
            "stack_trace": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
            "breadcrumbs": self.breadcrumbs,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "fatal": False,
        }
        if self.device is not None:
            payload["device"] = {
                "app_version": self.device.app_version,
                "brand": self.device.brand,
                "model": self.device.model,
                "manufacturer": self.device.manufacturer,
                "os": self.device.os_version,
                "abi": self.device.abi,
            }
        return payload

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
        atexit.unregister(self.shutdown)

    def _deliver(self, payload: Dict[str, Any]) -> Tuple[bool, str]:
        ok, message = network.submit_crash_report(self.endpoint, payload)
        if not ok:
            logger.debug(f"Exception report rejected: {message}")
        return ok, message

from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A controllable clock, fixed device metadata and settings rooted in a
   temporary directory.
3. Store and logger fixtures that are drained and shut down after use.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from chatlog.core.logger import AppLogger  # noqa: E402
from chatlog.core.store import LogStore  # noqa: E402
from chatlog.domain.config import LogSettings  # noqa: E402
from chatlog.domain.device import DeviceInfo, StaticAccountProvider  # noqa: E402


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
class FakeClock:
    """Callable clock returning a settable UTC moment."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now + timedelta(**kwargs)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Any, monkeypatch: pytest.MonkeyPatch) -> str:
    """Point the user data directory at a temporary folder for every test."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("CHATLOG_DATA_DIR", str(data_dir))
    return str(data_dir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 15, 10, 30, 45, 123000, tzinfo=timezone.utc))


@pytest.fixture
def device() -> DeviceInfo:
    return DeviceInfo(
        app_version="10.2.3",
        brand="google",
        model="Pixel 7",
        manufacturer="Google",
        os_version="34",
        abi="arm64-v8a",
    )


@pytest.fixture
def accounts() -> StaticAccountProvider:
    return StaticAccountProvider.from_user_ids([123456, None, 987654])


@pytest.fixture
def logs_dir(tmp_path: Any) -> str:
    path = tmp_path / "logs"
    path.mkdir()
    return str(path)


@pytest.fixture
def settings(logs_dir: str) -> LogSettings:
    return LogSettings(logs_dir=logs_dir)


@pytest.fixture
def disk_monitor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(
        settings: LogSettings,
        device: DeviceInfo,
        accounts: StaticAccountProvider,
        disk_monitor: MagicMock,
        clock: FakeClock,
) -> Generator[LogStore, None, None]:
    """A real store writing into ``logs_dir``, drained on teardown."""
    s = LogStore(settings, device=device, accounts=accounts, disk_monitor=disk_monitor, clock=clock)
    yield s
    s.shutdown(wait=True)


@pytest.fixture
def mock_store(settings: LogSettings, clock: FakeClock) -> MagicMock:
    """A store double that records scheduled appends without touching disk."""
    s = MagicMock(spec=LogStore)
    s.settings = settings
    s.clock = clock
    return s


@pytest.fixture
def app_logger(mock_store: MagicMock) -> AppLogger:
    """Logger wired to recording collaborators."""
    return AppLogger(mock_store, platform=MagicMock(), crash_reporter=MagicMock())

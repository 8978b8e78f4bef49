from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the application data and log directories, names the daily log
files and classifies I/O failures. Acts as the only place that knows how
file creation times are read on each platform.
"""

import errno
import os
from datetime import datetime
from typing import List, Optional

from chatlog.domain.constants import LOG_FILE_DATE_FMT, LOG_FILE_PREFIX, LOG_FILE_SUFFIX

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "ChatLog"
UNIX_APP_DIR_NAME = ".chatlog"
LOGS_SUBDIR = "logs"
DATA_DIR_ENV = "CHATLOG_DATA_DIR"

_STORAGE_EXHAUSTED_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Override: $CHATLOG_DATA_DIR
    - Windows: %LOCALAPPDATA%/ChatLog
    - Linux/Mac: ~/.chatlog

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = os.environ.get(DATA_DIR_ENV, "").strip()

    # Windows specific resolution
    if not path and os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def get_logs_dir() -> str:
    """Absolute path of the directory holding the daily log files."""
    return os.path.join(get_user_data_dir(), LOGS_SUBDIR)


def log_file_name(day: datetime) -> str:
    """
    Deterministic file name for a calendar day.

    Args:
        day: Any moment within the target day.

    Returns:
        str: ``log-YYYY-MM-DD.txt``.
    """
    return f"{LOG_FILE_PREFIX}{day.strftime(LOG_FILE_DATE_FMT)}{LOG_FILE_SUFFIX}"


def list_dir_files(directory: str) -> List[str]:
    """Absolute paths of the regular files directly inside ``directory``."""
    try:
        with os.scandir(directory) as it:
            return sorted(entry.path for entry in it if entry.is_file())
    except OSError:
        return []


def file_creation_time(path: str) -> float:
    """
    Creation timestamp (epoch seconds) of a file.

    Uses ``st_birthtime`` where the platform records it and falls back to
    ``st_ctime`` (creation time on Windows, metadata change time on Linux).

    Raises:
        OSError: If the file cannot be stat'ed.
    """
    st = os.stat(path)
    return float(getattr(st, "st_birthtime", st.st_ctime))


def file_size(path: str) -> Optional[int]:
    """Size in bytes, or None if the file does not exist."""
    try:
        return os.path.getsize(path)
    except OSError:
        return None


# -----------------------------------------------------------------------------
# FAILURE CLASSIFICATION
# -----------------------------------------------------------------------------

def is_storage_exhausted(exc: BaseException) -> bool:
    """True if ``exc`` reports a full disk or exceeded quota."""
    return isinstance(exc, OSError) and exc.errno in _STORAGE_EXHAUSTED_ERRNOS

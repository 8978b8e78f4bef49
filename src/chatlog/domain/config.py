from __future__ import annotations

"""
Settings Domain Management.

Loads the persisted JSON settings of the logging facility, merges them over
the defaults and validates them. ``LogSettings`` is the runtime object
injected into the logger and the store: every field is read on each call
and mutated only through lock-guarded setters.
"""

import json
import logging
import os
import threading
from typing import Any, Dict, List, Optional, Tuple

from chatlog.domain.constants import MAX_LOG_FILE_SIZE, RETENTION_HOURS
from chatlog.domain.levels import Level
from chatlog.exceptions import ConfigError
from chatlog.infra.fs import get_logs_dir, get_user_data_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"

_BOOL_KEYS = ("logs_enabled", "enable_rc_log", "enable_native_log")
_POSITIVE_INT_KEYS = ("max_file_size", "retention_hours")


# -----------------------------------------------------------------------------
# DEFAULTS & PERSISTENCE
# -----------------------------------------------------------------------------

def get_default_settings() -> Dict[str, Any]:
    """
    Generate the default settings dictionary.

    Returns:
        Dict[str, Any]: Default values for every recognised key.
    """
    return {
        "logs_enabled": True,
        "minimum_level": Level.DEBUG.name,
        "enable_rc_log": False,
        "enable_native_log": False,
        "max_file_size": MAX_LOG_FILE_SIZE,
        "retention_hours": RETENTION_HOURS,
        "logs_dir": None,
        "crash_endpoint": None,
    }


def get_settings_path() -> str:
    """Absolute path of the persisted settings file."""
    return os.path.join(get_user_data_dir(), SETTINGS_FILE_NAME)


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load persisted settings merged over the defaults.

    A missing file yields the defaults. A corrupt file is reported and
    ignored.

    Args:
        path: Settings file to read. Defaults to the user data directory.

    Returns:
        Dict[str, Any]: Merged settings dictionary.
    """
    settings = get_default_settings()
    target = path or get_settings_path()

    if not os.path.exists(target):
        return settings

    try:
        with open(target, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Settings file unreadable at {target}, using defaults: {e}")
        return settings

    if not isinstance(stored, dict):
        logger.warning(f"Settings file at {target} is not a JSON object, using defaults.")
        return settings

    for key, value in stored.items():
        if key in settings:
            settings[key] = value
        else:
            logger.debug(f"Ignoring unknown settings key: {key}")
    return settings


def save_settings(settings: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist a settings dictionary as JSON.

    Returns:
        bool: True if the file was written.
    """
    target = path or get_settings_path()
    try:
        os.makedirs(os.path.dirname(os.path.abspath(target)), exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            json.dump(settings, f, indent=2)
        return True
    except OSError as e:
        logger.error(f"Failed to save settings to {target}: {e}")
        return False


# -----------------------------------------------------------------------------
# VALIDATION
# -----------------------------------------------------------------------------

def validate_settings(
        raw: Dict[str, Any],
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Normalize a raw settings dictionary.

    Invalid values are replaced by their defaults and reported as warnings.

    Args:
        raw: Settings as loaded or overridden.
        strict: Raise instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Clean settings and warnings.

    Raises:
        ConfigError: In strict mode, on the first invalid value.
    """
    defaults = get_default_settings()
    clean = dict(defaults)
    warnings: List[str] = []

    def _reject(key: str, reason: str) -> None:
        msg = f"Invalid value for '{key}' ({reason}); using default {defaults[key]!r}."
        if strict:
            raise ConfigError(msg)
        warnings.append(msg)

    for key in _BOOL_KEYS:
        value = raw.get(key, defaults[key])
        if isinstance(value, bool):
            clean[key] = value
        else:
            _reject(key, "expected a boolean")

    try:
        clean["minimum_level"] = Level.parse(raw.get("minimum_level", defaults["minimum_level"])).name
    except ValueError as e:
        _reject("minimum_level", str(e))

    for key in _POSITIVE_INT_KEYS:
        value = raw.get(key, defaults[key])
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            clean[key] = value
        else:
            _reject(key, "expected a positive integer")

    for key in ("logs_dir", "crash_endpoint"):
        value = raw.get(key)
        if value is None or (isinstance(value, str) and value.strip()):
            clean[key] = value.strip() if isinstance(value, str) else None
        else:
            _reject(key, "expected a non-empty string or null")

    return clean, warnings


# -----------------------------------------------------------------------------
# RUNTIME SETTINGS
# -----------------------------------------------------------------------------

class LogSettings:
    """
    Thread-safe runtime configuration shared by the logger and the store.

    Readers take no lock: each attribute is a single reference swap.
    Writers serialize through ``_lock`` so compound updates stay coherent.
    """

    def __init__(
            self,
            logs_enabled: bool = True,
            minimum_level: Level = Level.DEBUG,
            enable_rc_log: bool = False,
            enable_native_log: bool = False,
            max_file_size: int = MAX_LOG_FILE_SIZE,
            retention_hours: int = RETENTION_HOURS,
            logs_dir: Optional[str] = None,
            crash_endpoint: Optional[str] = None,
    ) -> None:
        self._lock = threading.Lock()
        self._logs_enabled = logs_enabled
        self._minimum_level = minimum_level
        self.enable_rc_log = enable_rc_log
        self.enable_native_log = enable_native_log
        self.max_file_size = max_file_size
        self.retention_hours = retention_hours
        self.logs_dir = logs_dir or get_logs_dir()
        self.crash_endpoint = crash_endpoint

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogSettings":
        """Build runtime settings from a validated dictionary."""
        clean, warnings = validate_settings(data)
        for w in warnings:
            logger.warning(f"Settings constraint: {w}")
        return cls(
            logs_enabled=clean["logs_enabled"],
            minimum_level=Level.parse(clean["minimum_level"]),
            enable_rc_log=clean["enable_rc_log"],
            enable_native_log=clean["enable_native_log"],
            max_file_size=clean["max_file_size"],
            retention_hours=clean["retention_hours"],
            logs_dir=clean["logs_dir"],
            crash_endpoint=clean["crash_endpoint"],
        )

    @property
    def logs_enabled(self) -> bool:
        return self._logs_enabled

    def set_logs_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._logs_enabled = bool(enabled)

    @property
    def minimum_level(self) -> Level:
        return self._minimum_level

    def set_minimum_level(self, level: Level) -> None:
        resolved = Level.parse(level)
        with self._lock:
            self._minimum_level = resolved

    def accepts(self, level: Level) -> bool:
        """True if a call at ``level`` passes the enabled flag and threshold."""
        return self._logs_enabled and level.priority >= self._minimum_level.priority

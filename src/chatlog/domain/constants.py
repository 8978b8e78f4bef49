from __future__ import annotations

"""
Domain Constants.

Centralizes the fixed values of the log store: file naming, size ceiling,
retention window, timestamp layout and the channel names used when
mirroring to the platform logger.
"""

# -----------------------------------------------------------------------------
# CHANNELS
# -----------------------------------------------------------------------------
PLATFORM_TAG = "Nnngram"
NATIVE_TAG = "tgnet"

# Messages carrying this marker are dropped unless rc logging is enabled
RC_MARKER = "{rc}"

# -----------------------------------------------------------------------------
# FILE LIFECYCLE
# -----------------------------------------------------------------------------
LOG_FILE_PREFIX = "log-"
LOG_FILE_SUFFIX = ".txt"
LOG_FILE_DATE_FMT = "%Y-%m-%d"

MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
RETENTION_HOURS = 24

# Slack requested from the disk space monitor after an ENOSPC failure
LOW_DISK_REQUIRED_SLACK = 1

SESSION_MARKER_PREFIX = ">>>> Log start at "
TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S"

# -----------------------------------------------------------------------------
# ACCOUNTS
# -----------------------------------------------------------------------------
MAX_ACCOUNT_COUNT = 5

# -----------------------------------------------------------------------------
# APP IDENTITY
# -----------------------------------------------------------------------------
APP_VERSION = "1.0.0"

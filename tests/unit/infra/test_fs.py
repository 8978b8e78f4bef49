from __future__ import annotations

"""
Unit tests for the filesystem infrastructure layer.
"""

import errno
import os
from datetime import datetime, timezone
from pathlib import Path

from chatlog.infra.fs import (
    file_creation_time,
    file_size,
    get_logs_dir,
    get_user_data_dir,
    is_storage_exhausted,
    list_dir_files,
    log_file_name,
)


def test_log_file_name_uses_calendar_date() -> None:
    assert log_file_name(datetime(2024, 2, 9, 23, 59, tzinfo=timezone.utc)) == "log-2024-02-09.txt"


def test_data_dir_env_override(isolated_data_dir: str) -> None:
    assert get_user_data_dir() == os.path.abspath(isolated_data_dir)
    assert os.path.isdir(isolated_data_dir)
    assert get_logs_dir() == os.path.join(os.path.abspath(isolated_data_dir), "logs")


def test_storage_exhaustion_classification() -> None:
    assert is_storage_exhausted(OSError(errno.ENOSPC, "No space left on device"))
    assert not is_storage_exhausted(OSError(errno.EACCES, "Permission denied"))
    assert not is_storage_exhausted(ValueError("nope"))


def test_list_dir_files_skips_directories(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()

    assert list_dir_files(str(tmp_path)) == [str(tmp_path / "a.txt")]
    assert list_dir_files(str(tmp_path / "missing")) == []


def test_file_size_and_creation_time(tmp_path: Path) -> None:
    f = tmp_path / "x.txt"
    f.write_text("12345")

    assert file_size(str(f)) == 5
    assert file_size(str(tmp_path / "none")) is None
    assert file_creation_time(str(f)) > 0

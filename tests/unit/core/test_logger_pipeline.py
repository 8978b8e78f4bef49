from __future__ import annotations

"""
Unit tests for the emit pipeline.

Verifies:
1. Level and enabled-flag filtering produce no side effects.
2. The {rc} suppression rule and its toggle.
3. Crash reporter forwarding per level.
4. Scheduling of the message and traceback appends.
"""

import errno
from unittest.mock import MagicMock

import pytest

from chatlog.core.logger import AppLogger, format_stack_trace
from chatlog.domain.levels import Level
from chatlog.exceptions import ManualCrashError


def _assert_no_side_effects(app: AppLogger) -> None:
    app.platform.log.assert_not_called()
    app.crash_reporter.log_breadcrumb.assert_not_called()
    app.crash_reporter.record_exception.assert_not_called()
    app.store.schedule_append.assert_not_called()


# -----------------------------------------------------------------------------
# FILTERING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("threshold", list(Level))
def test_levels_below_threshold_are_silent(app_logger: AppLogger, threshold: Level) -> None:
    app_logger.set_minimum_log_level(threshold)

    for level in Level:
        if level.priority < threshold.priority:
            assert app_logger.log(level, "t", "m", RuntimeError("x")) is False

    _assert_no_side_effects(app_logger)


def test_disabled_logging_is_silent(app_logger: AppLogger) -> None:
    app_logger.settings.set_logs_enabled(False)

    assert app_logger.error("boom", tag="net", error=RuntimeError("x")) is False
    _assert_no_side_effects(app_logger)


def test_rc_heartbeat_is_suppressed_while_toggle_off(app_logger: AppLogger) -> None:
    """Scenario: emit(DEBUG, tag=None, '{rc} heartbeat') with the toggle off."""
    for level in Level:
        assert app_logger.log(level, None, "{rc} heartbeat") is False

    _assert_no_side_effects(app_logger)


def test_rc_lines_pass_when_toggle_on(app_logger: AppLogger) -> None:
    app_logger.settings.enable_rc_log = True

    assert app_logger.log(Level.DEBUG, None, "{rc} heartbeat") is True

    app_logger.platform.log.assert_called_once_with(Level.DEBUG, None, "{rc} heartbeat", None)
    app_logger.store.schedule_append.assert_called_once()


def test_minimum_level_warn_scenario(app_logger: AppLogger) -> None:
    """Scenario: setMinimumLogLevel(WARN) then INFO is dropped and WARN passes."""
    app_logger.set_minimum_log_level(Level.WARN)

    assert app_logger.info("ignored", tag="ui") is False
    _assert_no_side_effects(app_logger)

    assert app_logger.warn("slow frame", tag="ui") is True
    app_logger.platform.log.assert_called_once_with(Level.WARN, "ui", "slow frame", None)
    app_logger.crash_reporter.log_breadcrumb.assert_called_once_with("ui: slow frame")
    app_logger.store.schedule_append.assert_called_once()


# -----------------------------------------------------------------------------
# MIRRORING
# -----------------------------------------------------------------------------

def test_error_with_exception_scenario(app_logger: AppLogger, clock) -> None:
    """Scenario: emit(ERROR, 'net', 'timeout', IOException)."""
    err = OSError(errno.ETIMEDOUT, "socket timeout")

    assert app_logger.error("timeout", tag="net", error=err) is True

    app_logger.platform.log.assert_called_once_with(Level.ERROR, "net", "timeout", err)
    app_logger.crash_reporter.log_breadcrumb.assert_called_once_with("net: timeout")
    app_logger.crash_reporter.record_exception.assert_called_once_with(err)

    calls = app_logger.store.schedule_append.call_args_list
    assert len(calls) == 2
    assert calls[0].args == (Level.ERROR, "net", "timeout", clock.now)
    assert calls[1].args[:2] == (Level.ERROR, "net")
    assert "socket timeout" in calls[1].args[2]


def test_debug_and_info_skip_crash_reporter(app_logger: AppLogger) -> None:
    app_logger.debug("a")
    app_logger.info("b", error=RuntimeError("c"))

    app_logger.crash_reporter.log_breadcrumb.assert_not_called()
    app_logger.crash_reporter.record_exception.assert_not_called()
    assert app_logger.store.schedule_append.call_count == 3


def test_warn_with_exception_is_breadcrumb_only(app_logger: AppLogger) -> None:
    app_logger.warn("degraded", error=RuntimeError("x"))

    app_logger.crash_reporter.log_breadcrumb.assert_called_once_with("degraded")
    app_logger.crash_reporter.record_exception.assert_not_called()


def test_error_without_exception_records_breadcrumb_only(app_logger: AppLogger) -> None:
    app_logger.error("plain")

    app_logger.crash_reporter.log_breadcrumb.assert_called_once_with("plain")
    app_logger.crash_reporter.record_exception.assert_not_called()
    app_logger.store.schedule_append.assert_called_once()


def test_exception_in_place_of_message(app_logger: AppLogger) -> None:
    err = ValueError("bad")
    app_logger.w(err)

    app_logger.platform.log.assert_called_once_with(Level.WARN, None, "", err)
    assert app_logger.store.schedule_append.call_count == 2


def test_fatal_logs_only_when_error_given(app_logger: AppLogger) -> None:
    assert app_logger.fatal(None) is False
    _assert_no_side_effects(app_logger)

    err = RuntimeError("dead")
    assert app_logger.fatal(err) is True
    app_logger.platform.log.assert_called_once_with(Level.FATAL, None, "", err)
    app_logger.crash_reporter.record_exception.assert_called_once_with(err)


def test_short_aliases_route_to_levels(app_logger: AppLogger) -> None:
    app_logger.d("1")
    app_logger.i("2")
    app_logger.e("3")

    levels = [c.args[0] for c in app_logger.platform.log.call_args_list]
    assert levels == [Level.DEBUG, Level.INFO, Level.ERROR]


def test_format_stack_trace_contains_frames() -> None:
    try:
        raise KeyError("missing")
    except KeyError as e:
        text = format_stack_trace(e)

    assert text.startswith("Traceback (most recent call last):")
    assert text.endswith("KeyError: 'missing'")


# -----------------------------------------------------------------------------
# NATIVE PASSTHROUGH
# -----------------------------------------------------------------------------

def test_native_log_disabled_by_default(app_logger: AppLogger) -> None:
    app_logger.native_platform = MagicMock()
    app_logger.native_log(1, "Nnngram", "connected")

    app_logger.native_platform.log.assert_not_called()
    _assert_no_side_effects(app_logger)


def test_native_log_reemits_application_channel(app_logger: AppLogger) -> None:
    app_logger.settings.enable_native_log = True
    app_logger.native_platform = MagicMock()

    app_logger.native_log(2, "Nnngram", "reconnecting")
    app_logger.native_log(0, "conn", "raw frame")
    app_logger.native_log(7, "conn", "ignored")

    app_logger.platform.log.assert_called_once_with(Level.WARN, "tgnet", "reconnecting", None)
    assert app_logger.native_platform.log.call_count == 2
    app_logger.native_platform.log.assert_any_call(Level.DEBUG, "conn", "raw frame")


# -----------------------------------------------------------------------------
# MANUAL CONTROLS
# -----------------------------------------------------------------------------

def test_crash_raises_given_error(app_logger: AppLogger) -> None:
    with pytest.raises(KeyError):
        app_logger.crash(KeyError("k"))


def test_crash_raises_default_fault(app_logger: AppLogger) -> None:
    with pytest.raises(ManualCrashError, match="manual crash"):
        app_logger.crash()


def test_crash_is_noop_when_disabled(app_logger: AppLogger) -> None:
    app_logger.settings.set_logs_enabled(False)
    app_logger.crash(KeyError("k"))


def test_throw_exception_logs_warning(app_logger: AppLogger) -> None:
    app_logger.throw_exception()

    level, tag, message, error = app_logger.platform.log.call_args.args
    assert level is Level.WARN
    assert message == ""
    assert isinstance(error, ManualCrashError)


def test_controls_delegate_to_store(app_logger: AppLogger) -> None:
    target = MagicMock()
    app_logger.refresh_log()
    app_logger.share_log(target)

    app_logger.store.refresh_log.assert_called_once_with()
    app_logger.store.share_log.assert_called_once_with(target)


# -----------------------------------------------------------------------------
# STARTUP
# -----------------------------------------------------------------------------

def test_start_failure_on_full_disk_is_reported(app_logger: AppLogger) -> None:
    failure = OSError(errno.ENOSPC, "No space left on device")
    app_logger.store.start.side_effect = failure

    app_logger.start()

    app_logger.store.notify_low_disk.assert_called_once_with()
    app_logger.platform.log.assert_called_once_with(Level.ERROR, None, "Logger crashes", failure)
    app_logger.crash_reporter.record_exception.assert_called_once_with(failure)


def test_start_failure_other_error_does_not_notify(app_logger: AppLogger) -> None:
    app_logger.store.start.side_effect = PermissionError(errno.EACCES, "denied")

    app_logger.start()

    app_logger.store.notify_low_disk.assert_not_called()
    app_logger.platform.log.assert_called_once()


def test_create_uses_http_reporter_for_endpoint(settings, device, clock) -> None:
    from chatlog.core.crash import HttpCrashReporter

    settings.crash_endpoint = "https://crash.example.com/report"
    app = AppLogger.create(settings, device=device, clock=clock, start=False)
    try:
        assert isinstance(app.crash_reporter, HttpCrashReporter)
        assert app.store.device is device
    finally:
        app.shutdown()

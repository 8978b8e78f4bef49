from __future__ import annotations

"""
Main Entry Point and Global Supervisor.

Routes execution to the CLI and provides the exception hook that sends
uncaught exceptions through the logging pipeline at FATAL before the
interpreter's default handling runs.
"""

import sys
from types import TracebackType
from typing import Callable, Optional, Type

from chatlog.core.logger import AppLogger

ExceptHook = Callable[[Type[BaseException], BaseException, Optional[TracebackType]], None]


def install_exception_hook(app_logger: AppLogger) -> ExceptHook:
    """
    Chain a FATAL-logging hook in front of the current ``sys.excepthook``.

    Pending writes are drained before the previous hook runs so the
    traceback reaches the day file even when the process is exiting.

    Returns:
        ExceptHook: The hook that was replaced.
    """
    previous = sys.excepthook

    def _hook(exctype: Type[BaseException], value: BaseException, tb: Optional[TracebackType]) -> None:
        if value.__traceback__ is None and tb is not None:
            value = value.with_traceback(tb)
        app_logger.fatal(value)
        app_logger.store.flush()
        previous(exctype, value, tb)

    sys.excepthook = _hook
    return previous


def main() -> int:
    from chatlog.interface.cli.app import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Bootstraps logging, resolves settings (defaults, persisted file and CLI
overrides), builds the logger and runs the requested maintenance command.
"""

import sys
from typing import Any, Dict, List, Optional

from chatlog.core.logger import AppLogger
from chatlog.domain.config import LogSettings, load_settings
from chatlog.infra.logging import LoggingConfig, configure_logging, get_logger
from chatlog.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig(level="DEBUG" if args.debug else "WARNING"))
    logger.debug(f"CLI command '{args.command}' initiated. Resolving settings...")

    raw = _merge_settings(load_settings(args.config_path), cli_args.args_to_overrides(args))
    settings = LogSettings.from_dict(raw)
    app_logger = AppLogger.create(settings, start=False)
    try:
        return _dispatch(args, app_logger)
    finally:
        app_logger.shutdown(wait=True)


def _dispatch(args: Any, app_logger: AppLogger) -> int:
    store = app_logger.store

    if args.command == "tail":
        print(store.recent_lines(args.lines), end="")
        return 0

    if args.command == "purge":
        for path in store.purge_stale_files():
            print(path)
        return 0

    if args.command == "refresh":
        if not store.refresh_log():
            print("Failed to refresh the log file.", file=sys.stderr)
            return 1
        print(store.active_path())
        return 0

    if args.command == "write":
        level = cli_args.parse_level(args.level)
        if level is None:
            names = ", ".join(cli_args.level_names())
            print(f"Unknown level '{args.level}'. Expected one of: {names}", file=sys.stderr)
            return 1
        app_logger.start()
        accepted = app_logger.log(level, args.tag, args.message)
        if not accepted:
            print("Line was filtered out by the current settings.", file=sys.stderr)
        return 0

    return 1


def _merge_settings(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    merged.update(overrides)
    return merged

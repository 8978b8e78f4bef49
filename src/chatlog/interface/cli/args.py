from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the maintenance command-line interface and translates parsed
namespaces into settings overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from chatlog.domain.levels import Level

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the chatlog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="chatlog",
        description="Inspect and maintain the daily application log files.",
    )

    # --- Global Options ---
    p.add_argument(
        "--logs-dir",
        dest="logs_dir",
        default=None,
        help="Directory holding the log-YYYY-MM-DD.txt files.",
    )
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Settings JSON file (defaults to the user data directory).",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Print internal diagnostics to stderr.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    tail = sub.add_parser("tail", help="Print the last lines of today's log file.")
    tail.add_argument("-n", "--lines", dest="lines", type=int, default=50)

    sub.add_parser("purge", help="Delete log files older than the retention window.")
    sub.add_parser("refresh", help="Restart today's log file with a fresh header.")

    write = sub.add_parser("write", help="Emit one line through the logging pipeline.")
    write.add_argument("level", help="DEBUG, INFO, WARN, ERROR or FATAL.")
    write.add_argument("message")
    write.add_argument("--tag", dest="tag", default=None)

    return p


# -----------------------------------------------------------------------------
# OVERRIDE MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Map global options onto settings keys. Unset options are omitted.

    Args:
        args: Parsed namespace.

    Returns:
        Dict[str, Any]: Settings overrides.
    """
    overrides: Dict[str, Any] = {}
    if args.logs_dir:
        overrides["logs_dir"] = args.logs_dir
    return overrides


def parse_level(raw: str) -> Optional[Level]:
    """Resolve a level name, or None if it is not recognised."""
    try:
        return Level.parse(raw)
    except ValueError:
        return None


def level_names() -> List[str]:
    return [level.name for level in Level]

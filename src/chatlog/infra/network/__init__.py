from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the HTTP clients used by the remote collaborators.
"""

from chatlog.infra.network.crash_client import submit_crash_report

__all__ = [
    "submit_crash_report",
]

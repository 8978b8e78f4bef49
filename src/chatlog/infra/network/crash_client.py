from __future__ import annotations

import logging
from typing import Any, Dict, Tuple

import requests

from chatlog.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)


def submit_crash_report(endpoint: str, payload: Dict[str, Any]) -> Tuple[bool, str]:
    """Transmit a non-fatal exception report to the aggregation endpoint."""
    return _secure_post(endpoint, payload)


def _secure_post(url: str, data: Dict[str, Any]) -> Tuple[bool, str]:
    """Execute a JSON POST request, reporting failures as a (False, reason) tuple."""
    headers = {"User-Agent": USER_AGENT}
    try:
        response = requests.post(url, json=data, headers=headers, timeout=DEFAULT_TIMEOUT)
    except requests.RequestException as e:
        logger.debug(f"Crash report delivery failed: {e}")
        return False, str(e)
    if response.status_code in (200, 201, 202):
        return True, "Success"
    return False, f"HTTP {response.status_code}"

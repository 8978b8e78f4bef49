from __future__ import annotations

USER_AGENT = "ChatLog-Client/1.0.0"
DEFAULT_TIMEOUT = 10

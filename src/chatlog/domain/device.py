from __future__ import annotations

"""
Device and Account Metadata.

Descriptive data written at the top of every freshly created log file:
the application build, the host device and the signed-in account slots.
"""

import platform
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol

from chatlog.domain.constants import APP_VERSION, MAX_ACCOUNT_COUNT


@dataclass(frozen=True)
class DeviceInfo:
    """
    Static description of the running build and host.

    Attributes:
        app_version: Application version string.
        brand: Device brand.
        model: Device model.
        manufacturer: Device manufacturer.
        os_version: Operating system version identifier.
        abi: CPU ABI identifier.
    """
    app_version: str
    brand: str
    model: str
    manufacturer: str
    os_version: str
    abi: str


def collect_device_info(app_version: str = APP_VERSION) -> DeviceInfo:
    """
    Describe the current host using the ``platform`` module.

    Args:
        app_version: Version string of the embedding application.

    Returns:
        DeviceInfo: Populated description. Unknown fields become ``unknown``.
    """
    uname = platform.uname()
    return DeviceInfo(
        app_version=app_version,
        brand=uname.system or "unknown",
        model=uname.node or "unknown",
        manufacturer=platform.python_implementation() or "unknown",
        os_version=uname.release or "unknown",
        abi=uname.machine or "unknown",
    )


# -----------------------------------------------------------------------------
# ACCOUNTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AccountSlot:
    """One account slot of the host application."""
    index: int
    user_id: Optional[int] = None
    activated: bool = False


class AccountProvider(Protocol):
    """Enumerates the host application's account slots."""

    def __iter__(self) -> Iterator[AccountSlot]:
        ...


class StaticAccountProvider:
    """Fixed list of account slots, capped at ``MAX_ACCOUNT_COUNT``."""

    def __init__(self, slots: Iterable[AccountSlot] = ()) -> None:
        self._slots: List[AccountSlot] = sorted(slots, key=lambda s: s.index)[:MAX_ACCOUNT_COUNT]

    @classmethod
    def from_user_ids(cls, user_ids: Iterable[Optional[int]]) -> "StaticAccountProvider":
        """Build slots from positional ids; ``None`` marks a signed-out slot."""
        return cls(
            AccountSlot(index=i, user_id=uid, activated=uid is not None)
            for i, uid in enumerate(user_ids)
        )

    def __iter__(self) -> Iterator[AccountSlot]:
        return iter(list(self._slots))


def active_accounts(provider: Optional[Iterable[AccountSlot]]) -> List[AccountSlot]:
    """Signed-in slots among indices ``0..MAX_ACCOUNT_COUNT-1``, ascending."""
    if provider is None:
        return []
    slots = [
        s for s in provider
        if 0 <= s.index < MAX_ACCOUNT_COUNT and s.activated and s.user_id is not None
    ]
    return sorted(slots, key=lambda s: s.index)

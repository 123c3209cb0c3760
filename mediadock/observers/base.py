"""Observer interfaces."""

from __future__ import annotations

from typing import Protocol

from mediadock.core.model import PhysicalDevice


class DeviceObserver(Protocol):
    def snapshot(self) -> list[PhysicalDevice]:
        """Return every removable device attached right now, not a delta."""

"""Presence reconciliation between observed snapshots and tracked devices."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from mediadock.core.device_match import recognize_device
from mediadock.core.errors import CatalogMissingError
from mediadock.core.events import EventChannel
from mediadock.core.model import DeviceCatalog, PhysicalDevice, RecognizedDevice

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectedDeviceEntry:
    device: PhysicalDevice
    recognized: RecognizedDevice


class PresenceReconciler:
    """Tracks recognized devices across full snapshots of attached devices.

    Each call to :meth:`synchronize` computes its own delta against the
    devices already tracked: vanished devices are disconnected first, then
    newly observed devices are recognized against the current catalog and
    connected. Not reentrant; callers must serialize invocations.
    """

    def __init__(self, catalog: DeviceCatalog | None = None) -> None:
        self.catalog = catalog
        self.device_connected = EventChannel("device-connected")
        self.device_disconnected = EventChannel("device-disconnected")
        self._connected: dict[str, ConnectedDeviceEntry] = {}

    def synchronize(self, observed: Sequence[PhysicalDevice]) -> None:
        catalog = self.catalog
        if catalog is None:
            raise CatalogMissingError(
                "No device catalog configured; load a catalog before synchronizing."
            )

        observed_ids = {device.device_id for device in observed}
        changes = self._detect_disconnected(observed_ids)
        changes += self._detect_connected(observed, catalog)
        if not changes:
            LOGGER.debug("No presence changes across %d observed device(s)", len(observed))

    def connected_devices(self) -> dict[str, ConnectedDeviceEntry]:
        """Return a copy of the tracked devices keyed by device ID."""
        return dict(self._connected)

    def is_connected(self, device_id: str) -> bool:
        return device_id in self._connected

    def teardown(self) -> None:
        """Disconnect every tracked device, notifying subscribers for each."""
        for device_id in list(self._connected):
            self._disconnect(device_id)

    def _detect_disconnected(self, observed_ids: set[str]) -> int:
        removed = 0
        for device_id in list(self._connected):
            if device_id not in observed_ids:
                self._disconnect(device_id)
                removed += 1
        return removed

    def _detect_connected(self, observed: Sequence[PhysicalDevice], catalog: DeviceCatalog) -> int:
        added = 0
        seen: set[str] = set()
        for device in observed:
            if device.device_id in seen:
                continue
            seen.add(device.device_id)

            entry = self._connected.get(device.device_id)
            if entry is not None:
                # Same attachment, possibly remounted: keep the latest snapshot without re-firing.
                if entry.device is not device:
                    self._connected[device.device_id] = replace(entry, device=device)
                continue

            recognized = recognize_device(device, catalog)
            if recognized is None:
                LOGGER.debug("Ignoring unrecognized device %s", device.device_id)
                continue

            device.connect()
            self._connected[device.device_id] = ConnectedDeviceEntry(device=device, recognized=recognized)
            added += 1
            LOGGER.info("Device connected: %s (%s)", device.device_id, recognized.name)
            self.device_connected.emit(device, recognized)
        return added

    def _disconnect(self, device_id: str) -> None:
        entry = self._connected.pop(device_id)
        entry.device.disconnect()
        # Report the rule captured at connect time; the catalog may have been reloaded since.
        LOGGER.info("Device disconnected: %s (%s)", device_id, entry.recognized.name)
        self.device_disconnected.emit(entry.device, entry.recognized)

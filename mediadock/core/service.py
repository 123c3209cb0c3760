"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from mediadock.core.catalog_loader import load_catalog
from mediadock.core.device_match import recognize_device
from mediadock.core.errors import DeviceDiscoveryError
from mediadock.core.model import DeviceCatalog, PhysicalDevice, RecognitionRule, RecognizedDevice
from mediadock.core.reconciler import PresenceReconciler
from mediadock.observers.base import DeviceObserver
from mediadock.observers.lsblk import LsblkObserver

LOGGER = logging.getLogger(__name__)


class MonitorService:
    def __init__(
        self,
        *,
        observer: DeviceObserver | None = None,
        catalog: DeviceCatalog | None = None,
        catalog_path: Path | str | None = None,
    ) -> None:
        self.catalog_path = catalog_path
        self.load_warnings: tuple[str, ...] = ()
        if catalog is None:
            loaded = load_catalog(catalog_path)
            catalog = loaded.catalog
            self.load_warnings = loaded.warnings
        self.observer = observer or LsblkObserver()
        self.reconciler = PresenceReconciler(catalog)

    @property
    def catalog(self) -> DeviceCatalog | None:
        return self.reconciler.catalog

    def list_rules(self) -> list[RecognitionRule]:
        if self.catalog is None:
            return []
        return list(self.catalog.devices)

    def list_devices(self) -> list[PhysicalDevice]:
        return list(self.observer.snapshot())

    def match_devices(self) -> list[tuple[PhysicalDevice, RecognizedDevice | None]]:
        catalog = self.catalog or DeviceCatalog()
        return [(device, recognize_device(device, catalog)) for device in self.list_devices()]

    def reload_catalog(self) -> tuple[str, ...]:
        """Swap in a freshly loaded catalog; tracked devices keep their rules."""
        loaded = load_catalog(self.catalog_path)
        self.reconciler.catalog = loaded.catalog
        self.load_warnings = loaded.warnings
        LOGGER.info("Reloaded catalog with %d rule(s)", len(loaded.catalog.devices))
        return loaded.warnings

    def poll(self) -> None:
        self.reconciler.synchronize(self.list_devices())

    def watch(
        self,
        interval_s: float = 2.0,
        *,
        max_ticks: int | None = None,
        stop: threading.Event | None = None,
    ) -> int:
        """Poll until ``stop`` is set or ``max_ticks`` polls ran; returns the tick count.

        Discovery failures are logged and retried on the next tick; any other
        error ends the loop.
        """
        stop = stop or threading.Event()
        ticks = 0
        while not stop.is_set():
            try:
                self.poll()
            except DeviceDiscoveryError as exc:
                LOGGER.warning("Device discovery failed, retrying next tick: %s", exc)
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop.wait(interval_s)
        return ticks

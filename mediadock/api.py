"""Stable public API for building tooling on top of mediadock.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import threading
from pathlib import Path

from mediadock.core.catalog_loader import load_catalog
from mediadock.core.errors import (
    CatalogLoadError,
    CatalogMissingError,
    CatalogValidationError,
    ConfigurationError,
    DeviceDiscoveryError,
    MediadockError,
)
from mediadock.core.events import DeviceEventHandler, EventChannel
from mediadock.core.model import (
    DeviceCatalog,
    LoadedCatalog,
    PhysicalDevice,
    RecognitionRule,
    RecognizedDevice,
)
from mediadock.core.reconciler import ConnectedDeviceEntry, PresenceReconciler
from mediadock.core.service import MonitorService
from mediadock.observers.base import DeviceObserver
from mediadock.observers.lsblk import LsblkObserver, RemovableDrive

__all__ = [
    "MediadockError",
    "ConfigurationError",
    "CatalogMissingError",
    "CatalogLoadError",
    "CatalogValidationError",
    "DeviceDiscoveryError",
    "DeviceCatalog",
    "LoadedCatalog",
    "PhysicalDevice",
    "RecognitionRule",
    "RecognizedDevice",
    "DeviceEventHandler",
    "EventChannel",
    "ConnectedDeviceEntry",
    "PresenceReconciler",
    "DeviceObserver",
    "LsblkObserver",
    "RemovableDrive",
    "load_catalog",
    "Client",
]


class Client:
    """Public client for monitoring removable devices.

    A `Client` instance wraps catalog loading, device observation and
    presence reconciliation behind a stable API intended for third-party
    tools (sync daemons, tray apps, scripts).
    """

    def __init__(
        self,
        *,
        observer: DeviceObserver | None = None,
        catalog: DeviceCatalog | None = None,
        catalog_path: Path | str | None = None,
    ) -> None:
        self._service = MonitorService(observer=observer, catalog=catalog, catalog_path=catalog_path)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    @property
    def catalog(self) -> DeviceCatalog | None:
        return self._service.catalog

    @catalog.setter
    def catalog(self, catalog: DeviceCatalog | None) -> None:
        self._service.reconciler.catalog = catalog

    def on_connected(self, handler: DeviceEventHandler) -> None:
        self._service.reconciler.device_connected.subscribe(handler)

    def on_disconnected(self, handler: DeviceEventHandler) -> None:
        self._service.reconciler.device_disconnected.subscribe(handler)

    def remove_handler(self, handler: DeviceEventHandler) -> bool:
        removed_connected = self._service.reconciler.device_connected.unsubscribe(handler)
        removed_disconnected = self._service.reconciler.device_disconnected.unsubscribe(handler)
        return removed_connected or removed_disconnected

    def list_rules(self) -> list[RecognitionRule]:
        return self._service.list_rules()

    def list_devices(self) -> list[PhysicalDevice]:
        return self._service.list_devices()

    def connected_devices(self) -> dict[str, ConnectedDeviceEntry]:
        return self._service.reconciler.connected_devices()

    def reload_catalog(self) -> tuple[str, ...]:
        return self._service.reload_catalog()

    def poll(self) -> None:
        self._service.poll()

    def watch(
        self,
        interval_s: float = 2.0,
        *,
        max_ticks: int | None = None,
        stop: threading.Event | None = None,
    ) -> int:
        return self._service.watch(interval_s, max_ticks=max_ticks, stop=stop)

    def close(self) -> None:
        self._service.reconciler.teardown()

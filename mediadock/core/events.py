"""Publish/subscribe channel for device presence notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable

from mediadock.core.model import PhysicalDevice, RecognizedDevice

DeviceEventHandler = Callable[[PhysicalDevice, RecognizedDevice], None]
LOGGER = logging.getLogger(__name__)


class EventChannel:
    """Ordered list of subscribers for one event type.

    Handlers run synchronously in subscription order. Exceptions raised by a
    handler propagate to whoever emitted the event.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[DeviceEventHandler] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: DeviceEventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: DeviceEventHandler) -> bool:
        try:
            self._handlers.remove(handler)
        except ValueError:
            LOGGER.debug("Handler %r was not subscribed to %s", handler, self.name)
            return False
        return True

    def emit(self, device: PhysicalDevice, recognized: RecognizedDevice) -> None:
        # Copy so handlers may unsubscribe themselves mid-dispatch.
        for handler in tuple(self._handlers):
            handler(device, recognized)

"""Device-to-rule recognition logic."""

from __future__ import annotations

from collections.abc import Iterable

from mediadock.core.model import DeviceCatalog, PhysicalDevice, RecognitionRule, RecognizedDevice


def recognize_device(device: PhysicalDevice, catalog: DeviceCatalog) -> RecognizedDevice | None:
    """Return the first catalog rule whose pattern equals the device ID, if any."""
    rule = catalog.recognize(device.device_id)
    if rule is None:
        return None
    return RecognizedDevice(device_id=device.device_id, rule=rule)


def duplicate_patterns(rules: Iterable[RecognitionRule]) -> list[str]:
    seen: set[str] = set()
    duplicates: list[str] = []
    for rule in rules:
        if rule.pattern in seen and rule.pattern not in duplicates:
            duplicates.append(rule.pattern)
        seen.add(rule.pattern)
    return duplicates

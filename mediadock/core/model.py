"""Core data models shared by the reconciler, catalog loader, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class PhysicalDevice(Protocol):
    """A currently attached removable device as reported by an observer.

    Identity is ``device_id``: two snapshots of the same attachment may
    differ in mount path or name and still refer to one device.
    """

    @property
    def device_id(self) -> str: ...

    @property
    def mount_path(self) -> str | None: ...

    @property
    def name(self) -> str: ...

    def connect(self) -> None: ...

    def disconnect(self) -> None: ...


@dataclass(frozen=True)
class RecognitionRule:
    pattern: str
    name: str
    kind: str = "media-player"
    media_root: str | None = None


@dataclass(frozen=True)
class DeviceCatalog:
    rules: tuple[RecognitionRule, ...] = ()

    @property
    def devices(self) -> tuple[RecognitionRule, ...]:
        return self.rules

    def recognize(self, device_id: str) -> RecognitionRule | None:
        for rule in self.rules:
            if rule.pattern == device_id:
                return rule
        return None


@dataclass(frozen=True)
class RecognizedDevice:
    device_id: str
    rule: RecognitionRule

    @property
    def name(self) -> str:
        return self.rule.name

    @property
    def kind(self) -> str:
        return self.rule.kind


@dataclass(frozen=True)
class LoadedCatalog:
    catalog: DeviceCatalog
    warnings: tuple[str, ...]

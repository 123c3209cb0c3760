"""Removable drive observer backed by ``lsblk --json``."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from mediadock.core.errors import DeviceDiscoveryError

LSBLK_COMMAND = (
    "lsblk",
    "--json",
    "--output",
    "NAME,PATH,SERIAL,LABEL,MODEL,MOUNTPOINT,RM,HOTPLUG",
)
LOGGER = logging.getLogger(__name__)


@dataclass(eq=False)
class RemovableDrive:
    """A removable block device seen in one lsblk snapshot.

    Equality and hashing use ``device_id`` only, so a drive remounted at a
    different path compares equal to its earlier snapshot.
    """

    device_id: str
    name: str
    mount_path: str | None = None
    attached: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RemovableDrive):
            return NotImplemented
        return self.device_id == other.device_id

    def __hash__(self) -> int:
        return hash(self.device_id)

    def connect(self) -> None:
        self.attached = True
        LOGGER.debug("Attached %s at %s", self.device_id, self.mount_path)

    def disconnect(self) -> None:
        self.attached = False
        LOGGER.debug("Detached %s", self.device_id)


class LsblkObserver:
    def __init__(self, command: Sequence[str] = LSBLK_COMMAND) -> None:
        self.command = tuple(command)

    def snapshot(self) -> list[RemovableDrive]:
        result = _run_lsblk(self.command)
        if result is None:
            LOGGER.debug("%s not available; reporting no devices", self.command[0])
            return []
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise DeviceDiscoveryError(
                f"{' '.join(self.command)} exited with status {result.returncode}: {stderr}"
            )
        return parse_lsblk(result.stdout)


def parse_lsblk(output: str) -> list[RemovableDrive]:
    try:
        doc = json.loads(output)
    except json.JSONDecodeError as exc:
        raise DeviceDiscoveryError(f"Could not parse lsblk output: {exc}") from exc

    if not isinstance(doc, dict) or not isinstance(doc.get("blockdevices"), list):
        raise DeviceDiscoveryError("lsblk output is missing 'blockdevices'")

    seen: set[str] = set()
    drives: list[RemovableDrive] = []
    for disk in doc["blockdevices"]:
        if not (_flag(disk.get("rm")) or _flag(disk.get("hotplug"))):
            continue
        drive = _drive_from_disk(disk)
        if drive.device_id in seen:
            continue
        seen.add(drive.device_id)
        drives.append(drive)
    return drives


def _drive_from_disk(disk: dict[str, Any]) -> RemovableDrive:
    serial = (disk.get("serial") or "").strip().upper()
    kernel_path = disk.get("path") or f"/dev/{disk.get('name') or ''}"
    return RemovableDrive(
        device_id=serial or kernel_path,
        name=_first_text(disk, "label", "model") or disk.get("name") or "<unknown-drive>",
        mount_path=_first_mountpoint(disk),
    )


def _first_text(disk: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        for node in (disk, *disk.get("children", [])):
            value = (node.get(key) or "").strip()
            if value:
                return value
    return None


def _first_mountpoint(disk: dict[str, Any]) -> str | None:
    if disk.get("mountpoint"):
        return disk["mountpoint"]
    for child in disk.get("children", []):
        found = _first_mountpoint(child)
        if found:
            return found
    return None


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip() in {"1", "true"}


def _run_lsblk(cmd: Sequence[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            cmd,
            check=False,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return None

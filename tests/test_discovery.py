from __future__ import annotations

import json
import subprocess

import pytest

from mediadock.core.errors import DeviceDiscoveryError
from mediadock.observers.lsblk import LsblkObserver, RemovableDrive, parse_lsblk


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


LSBLK_OUTPUT = json.dumps(
    {
        "blockdevices": [
            {
                "name": "nvme0n1",
                "path": "/dev/nvme0n1",
                "serial": "S4EWNX0R",
                "label": None,
                "model": "Samsung SSD",
                "mountpoint": None,
                "rm": False,
                "hotplug": False,
                "children": [{"name": "nvme0n1p1", "mountpoint": "/", "label": None}],
            },
            {
                "name": "sdb",
                "path": "/dev/sdb",
                "serial": " 000a27001c4f1e3b ",
                "label": None,
                "model": "iPod",
                "mountpoint": None,
                "rm": True,
                "hotplug": True,
                "children": [
                    {"name": "sdb1", "label": None, "mountpoint": None},
                    {"name": "sdb2", "label": "JOE'S IPOD", "mountpoint": "/media/joe/IPOD"},
                ],
            },
            {
                "name": "sdc",
                "path": "/dev/sdc",
                "serial": None,
                "label": None,
                "model": None,
                "mountpoint": None,
                "rm": "1",
                "hotplug": "0",
            },
        ]
    }
)


def test_parse_lsblk_keeps_removable_disks() -> None:
    drives = parse_lsblk(LSBLK_OUTPUT)
    assert [d.device_id for d in drives] == ["000A27001C4F1E3B", "/dev/sdc"]

    ipod = drives[0]
    assert ipod.name == "JOE'S IPOD"
    assert ipod.mount_path == "/media/joe/IPOD"

    bare = drives[1]
    assert bare.name == "sdc"
    assert bare.mount_path is None


def test_removable_drive_identity_is_device_id() -> None:
    first = RemovableDrive(device_id="ABC", name="Player", mount_path="/media/p1")
    second = RemovableDrive(device_id="ABC", name="Player", mount_path="/media/p2")
    assert first == second
    assert hash(first) == hash(second)


def test_removable_drive_hooks_track_attachment() -> None:
    drive = RemovableDrive(device_id="ABC", name="Player")
    drive.connect()
    assert drive.attached
    drive.disconnect()
    assert not drive.attached


def test_observer_runs_lsblk(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text):
        assert cmd[0] == "lsblk"
        return _cp(list(cmd), 0, stdout=LSBLK_OUTPUT)

    monkeypatch.setattr(subprocess, "run", fake_run)

    drives = LsblkObserver().snapshot()
    assert len(drives) == 2


def test_observer_without_lsblk_reports_no_devices(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert LsblkObserver().snapshot() == []


def test_observer_raises_when_lsblk_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text):
        return _cp(list(cmd), 32, stderr="lsblk: failed to access sysfs")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(DeviceDiscoveryError):
        LsblkObserver().snapshot()


def test_garbled_output_raises() -> None:
    with pytest.raises(DeviceDiscoveryError):
        parse_lsblk("not json")
    with pytest.raises(DeviceDiscoveryError):
        parse_lsblk("{}")


def test_disk_without_name_or_label_gets_placeholder() -> None:
    output = json.dumps(
        {"blockdevices": [{"name": None, "path": "/dev/sdd", "serial": None, "label": None, "model": None, "rm": True}]}
    )
    drives = parse_lsblk(output)
    assert drives[0].device_id == "/dev/sdd"
    assert drives[0].name == "<unknown-drive>"

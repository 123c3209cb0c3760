from __future__ import annotations

from mediadock.core.events import EventChannel
from mediadock.core.model import RecognitionRule, RecognizedDevice
from mediadock.observers.lsblk import RemovableDrive


def _args() -> tuple[RemovableDrive, RecognizedDevice]:
    device = RemovableDrive(device_id="IPOD1", name="IPOD")
    return device, RecognizedDevice(device_id="IPOD1", rule=RecognitionRule(pattern="IPOD1", name="Classic"))


def test_emit_without_subscribers_is_noop() -> None:
    channel = EventChannel("device-connected")
    channel.emit(*_args())
    assert len(channel) == 0


def test_handlers_run_in_subscription_order() -> None:
    channel = EventChannel("device-connected")
    calls: list[str] = []
    channel.subscribe(lambda device, recognized: calls.append("first"))
    channel.subscribe(lambda device, recognized: calls.append(f"second:{recognized.name}"))

    channel.emit(*_args())
    assert calls == ["first", "second:Classic"]


def test_unsubscribe_unknown_handler_returns_false() -> None:
    channel = EventChannel("device-disconnected")
    assert channel.unsubscribe(lambda device, recognized: None) is False


def test_handler_can_unsubscribe_during_emit() -> None:
    channel = EventChannel("device-connected")
    calls: list[str] = []

    def once(device, recognized) -> None:
        calls.append("once")
        channel.unsubscribe(once)

    channel.subscribe(once)
    channel.subscribe(lambda device, recognized: calls.append("always"))

    channel.emit(*_args())
    channel.emit(*_args())
    assert calls == ["once", "always", "always"]
    assert len(channel) == 1

from mediadock.core.device_match import duplicate_patterns, recognize_device
from mediadock.core.model import DeviceCatalog, RecognitionRule
from mediadock.observers.lsblk import RemovableDrive


def _rule(pattern: str, name: str) -> RecognitionRule:
    return RecognitionRule(pattern=pattern, name=name)


def test_recognize_uses_exact_match() -> None:
    catalog = DeviceCatalog(rules=(_rule("IPOD1", "Classic"),))
    assert recognize_device(RemovableDrive(device_id="IPOD10", name="x"), catalog) is None
    assert recognize_device(RemovableDrive(device_id="ipod1", name="x"), catalog) is None

    recognized = recognize_device(RemovableDrive(device_id="IPOD1", name="x"), catalog)
    assert recognized is not None
    assert recognized.device_id == "IPOD1"
    assert recognized.name == "Classic"
    assert recognized.kind == "media-player"


def test_first_rule_in_catalog_order_wins() -> None:
    catalog = DeviceCatalog(rules=(_rule("X001", "RuleA"), _rule("X001", "RuleB")))
    recognized = recognize_device(RemovableDrive(device_id="X001", name="x"), catalog)
    assert recognized is not None
    assert recognized.rule.name == "RuleA"


def test_catalog_devices_preserve_order() -> None:
    rules = (_rule("B", "Beta"), _rule("A", "Alpha"))
    assert DeviceCatalog(rules=rules).devices == rules


def test_duplicate_patterns_reported_once() -> None:
    rules = [_rule("A", "1"), _rule("B", "2"), _rule("A", "3"), _rule("A", "4")]
    assert duplicate_patterns(rules) == ["A"]

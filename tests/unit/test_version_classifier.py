import pytest
from dockeryzer.DETECTORS.version_classifier import classify, get_major_version, get_minor_version
from dockeryzer.MODELS.language_info import Tier, Runtime


def test_major_and_minor_versions():
    assert get_major_version("18.17.1") == 18
    assert get_minor_version("3.7.2") == 7
    assert get_major_version("") == 0
    assert get_major_version("abc") == 0
    assert get_major_version("17-openjdk") == 0
    assert get_minor_version("3") == 0
    assert get_minor_version("3.x") == 0


@pytest.mark.parametrize("runtime,version,expected", [
    ("Node.js", "12.22.0", Tier.ERROR),
    ("Node.js", "13.9.0", Tier.ERROR),
    ("Node.js", "14.0.0", Tier.WARNING),
    ("Node.js", "16.20.2", Tier.WARNING),
    ("Node.js", "17.0.0", Tier.SUCCESS),
    ("Node.js", "20.0.0", Tier.SUCCESS),
    ("Python", "2.7.18", Tier.ERROR),
    ("Python", "3.7.2", Tier.WARNING),
    ("Python", "3.8.0", Tier.SUCCESS),
    ("Python", "3.12.1", Tier.SUCCESS),
    ("Java", "8", Tier.ERROR),
    ("Java", "10", Tier.ERROR),
    ("Java", "11.0.2", Tier.WARNING),
    ("Java", "16.0.2", Tier.WARNING),
    ("Java", "17.0.1", Tier.SUCCESS),
    ("Go", "1.18", Tier.WARNING),
    ("Go", "1.19.0", Tier.SUCCESS),
    ("Go", "1.21.0", Tier.SUCCESS),
    ("PHP", "5.6", Tier.ERROR),
    ("PHP", "7.4.33", Tier.WARNING),
    ("PHP", "8.2.0", Tier.SUCCESS),
    ("Ruby", "1.9.3", Tier.ERROR),
    ("Ruby", "2.7.8", Tier.WARNING),
    ("Ruby", "3.2.2", Tier.SUCCESS),
    (".NET", "3.1.0", Tier.WARNING),
    (".NET", "8.0.0", Tier.SUCCESS),
    ("Rust", "1.0.0", Tier.SUCCESS),
])
def test_numeric_thresholds(runtime, version, expected):
    assert classify(runtime, version) == expected


def test_placeholder_versions():
    assert classify(Runtime.GO, "compiled") == Tier.SUCCESS
    assert classify(Runtime.GO, "detected") == Tier.SUCCESS
    assert classify(Runtime.RUST, "unknown") == Tier.SUCCESS
    assert classify(Runtime.JAVA, "detected") == Tier.WARNING
    assert classify(Runtime.NODEJS, "unknown") == Tier.WARNING
    assert classify(Runtime.DOTNET, "detected") == Tier.WARNING


def test_unparseable_version_counts_as_zero():
    assert classify(Runtime.JAVA, "17-openjdk") == Tier.ERROR
    assert classify(Runtime.NODEJS, "lts") == Tier.ERROR
    assert classify(Runtime.DOTNET, "") == Tier.WARNING


def test_unknown_runtime_rejected():
    with pytest.raises(ValueError):
        classify("Cobol", "1.0")

import pytest
from packaging.version import InvalidVersion

from envdoctor.version_detector import (
    VersionTriple,
    compare_versions,
    meets_minimum,
    meets_minimum_version,
    parse_version,
)


@pytest.mark.parametrize("text, expected", [
    ("v18.17.0", VersionTriple(18, 17, 0)),
    ("9.12.4", VersionTriple(9, 12, 4)),
    ("rustc 1.72.0 (abc 2023-01-01)", VersionTriple(1, 72, 0)),
    ("wasm-pack 0.12.1", VersionTriple(0, 12, 1)),
    ("tool 1.2.3 built against 4.5.6", VersionTriple(1, 2, 3)),
])
def test_parse_version_extracts_embedded_triple(text, expected):
    assert parse_version(text) == expected


@pytest.mark.parametrize("text", ["", None, "not installed", "v20", "1.2", "nightly-2024"])
def test_parse_version_without_triple_is_none(text):
    assert parse_version(text) is None


def test_zero_version_is_not_none():
    assert parse_version("0.0.0") == VersionTriple(0, 0, 0)
    assert parse_version("0.0.0") is not None


def test_version_triple_str():
    assert str(VersionTriple(20, 11, 1)) == "20.11.1"


def test_meets_minimum_gates_on_major_only():
    assert meets_minimum(VersionTriple(20, 0, 0), 20)
    assert meets_minimum(VersionTriple(22, 1, 0), 20)
    assert not meets_minimum(VersionTriple(16, 99, 99), 20)


@pytest.mark.parametrize("required_major", [0, 1, 20])
def test_meets_minimum_none_is_false(required_major):
    assert not meets_minimum(None, required_major)


def test_compare_versions():
    assert compare_versions("1.8.0", "2.0.0") == -1
    assert compare_versions("2.0.0", "2.0.0") == 0
    assert compare_versions("2.0", "2.0.0") == 0
    assert compare_versions("2.1.0", "2.0.0") == 1


def test_meets_minimum_version_uses_full_version():
    assert meets_minimum_version(VersionTriple(20, 11, 0), "20.11.0")
    assert not meets_minimum_version(VersionTriple(20, 10, 9), "20.11.0")
    assert not meets_minimum_version(None, "0.0.1")


def test_compare_versions_rejects_invalid_versions():
    with pytest.raises(InvalidVersion):
        compare_versions("3.0.0", "20.x")

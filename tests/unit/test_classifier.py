"""Tests for test file classification."""

from pathlib import Path

import pytest

from browser_suite.classifier import classify, is_integration_test, relativize


@pytest.mark.parametrize(
    ("file", "expected"),
    [
        ("test/integration/login_test.js", True),
        ("test/integration/admin/users_test.coffee", True),
        ("apps/web/test/integration/login_test.js", True),
        ("test/unit/foo_test.js", False),
        ("test/integration_test.js", False),
        ("test/integrations/login_test.js", False),
        ("integration/test/login_test.js", False),
        ("foo_test.js", False),
    ],
)
def test_is_integration_test(file: str, expected: bool) -> None:
    """Matches the test/integration directory segments only."""
    assert is_integration_test(file) is expected


def test_classify_partitions_files() -> None:
    """Every file lands in exactly one bucket, in input order."""
    files = [
        "test/unit/b_test.js",
        "test/integration/login_test.js",
        "test/unit/a_test.coffee",
        "test/integration/signup_test.js",
    ]

    result = classify(files)

    assert result.unit == ["test/unit/b_test.js", "test/unit/a_test.coffee"]
    assert result.integration == [
        "test/integration/login_test.js",
        "test/integration/signup_test.js",
    ]
    assert set(result.unit) | set(result.integration) == set(files)
    assert not set(result.unit) & set(result.integration)


def test_classify_empty() -> None:
    """Empty input yields two empty buckets."""
    result = classify([])

    assert result.unit == []
    assert result.integration == []


def test_classify_with_custom_marker() -> None:
    """Honours a configured integration marker."""
    result = classify(["spec/e2e/a_test.js", "test/integration/b_test.js"], ("e2e",))

    assert result.integration == ["spec/e2e/a_test.js"]
    assert result.unit == ["test/integration/b_test.js"]


def test_relativize_strips_app_root(tmp_path: Path) -> None:
    """Absolute paths under the root become root-relative posix paths."""
    files = [tmp_path / "test" / "unit" / "a_test.js", "test/unit/b_test.js"]

    assert relativize(files, tmp_path) == ["test/unit/a_test.js", "test/unit/b_test.js"]


def test_relativize_keeps_outside_paths(tmp_path: Path) -> None:
    """Paths outside the root are left untouched."""
    outside = tmp_path.parent / "elsewhere_test.js"

    assert relativize([outside], tmp_path / "app") == [outside.as_posix()]

"""Tests for the runner factory."""

import pytest

from browser_suite.config import SuiteConfig
from browser_suite.models.result import TestCategory
from browser_suite.runners.factory import RunnerFactory
from browser_suite.runners.integration import IntegrationTestRunner
from browser_suite.runners.unit import UnitTestRunner
from browser_suite.testing.fakes import FakeApplication


@pytest.fixture
def factory(app: FakeApplication) -> RunnerFactory:
    """Factory with the default runner classes."""
    return RunnerFactory(app=app, config=SuiteConfig())


def test_one_runner_per_file_unit_first(factory: RunnerFactory) -> None:
    """Unit runners come first, each bound to a single file."""
    runners = factory.build_runners(
        ["test/unit/a_test.js", "test/unit/b_test.coffee"],
        ["test/integration/c_test.js"],
    )

    assert [type(r) for r in runners] == [
        UnitTestRunner,
        UnitTestRunner,
        IntegrationTestRunner,
    ]
    assert [list(r.files) for r in runners] == [
        ["test/unit/a_test.js"],
        ["test/unit/b_test.coffee"],
        ["test/integration/c_test.js"],
    ]
    assert [r.category for r in runners] == [
        TestCategory.UNIT,
        TestCategory.UNIT,
        TestCategory.INTEGRATION,
    ]


def test_runners_share_app_and_config(
    factory: RunnerFactory, app: FakeApplication
) -> None:
    """Every runner references the owning application and config."""
    runners = factory.build_runners(["test/unit/a_test.js"], ["test/integration/b.js"])

    assert all(r.app is app for r in runners)
    assert all(r.config is factory.config for r in runners)


def test_no_files_no_runners(factory: RunnerFactory) -> None:
    """Empty inputs produce no runners."""
    assert factory.build_runners([], []) == []


def test_runner_rejects_multiple_files(app: FakeApplication) -> None:
    """A runner is bound to exactly one file."""
    with pytest.raises(ValueError, match="exactly one file"):
        UnitTestRunner(app=app, files=["a_test.js", "b_test.js"], config=SuiteConfig())

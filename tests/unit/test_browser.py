"""Tests for browser report scraping and result mapping."""

from unittest.mock import AsyncMock, patch

import pytest

from browser_suite.config import SuiteConfig
from browser_suite.models.result import TestCategory
from browser_suite.runners.browser import BrowserReport, parse_report
from browser_suite.runners.unit import UnitTestRunner
from browser_suite.testing.fakes import FakeApplication


def test_parse_report() -> None:
    """Collects PASS and FAIL lines and ignores the rest."""
    output = """
Test file: harness.html
PASS: adds numbers
FAIL: validates email: expected true, got false
  some stack trace
PASS: renders view
"""

    passes, failures = parse_report(output)

    assert passes == ["adds numbers", "renders view"]
    assert failures == ["validates email: expected true, got false"]


@pytest.mark.parametrize(
    ("report", "succeeded"),
    [
        (BrowserReport(returncode=0, passes=["a"]), True),
        (BrowserReport(returncode=0), True),
        (BrowserReport(returncode=0, failures=["b"]), False),
        (BrowserReport(returncode=1, passes=["a"]), False),
    ],
)
def test_report_succeeded(report: BrowserReport, succeeded: bool) -> None:
    """Success needs a clean exit and no failures."""
    assert report.succeeded is succeeded


class TestRunnerResults:
    """Tests for mapping browser outcomes to results."""

    @pytest.fixture
    def runner(self, app: FakeApplication) -> UnitTestRunner:
        """Unit runner whose browser step is patched per test."""
        return UnitTestRunner(
            app=app, files=["test/unit/a_test.js"], config=SuiteConfig()
        )

    async def test_success(self, runner: UnitTestRunner) -> None:
        """A clean report is a success."""
        with patch.object(
            UnitTestRunner,
            "execute",
            new_callable=AsyncMock,
            return_value=BrowserReport(returncode=0, passes=["a"]),
        ):
            result = await runner.run()

        assert result.file == "test/unit/a_test.js"
        assert result.category == TestCategory.UNIT
        assert result.status == "success"
        assert result.passed

    async def test_assertion_failures(self, runner: UnitTestRunner) -> None:
        """Failing assertions are reported with their descriptions."""
        with patch.object(
            UnitTestRunner,
            "execute",
            new_callable=AsyncMock,
            return_value=BrowserReport(returncode=1, failures=["b: boom", "c: bang"]),
        ):
            result = await runner.run()

        assert result.status == "failure"
        assert result.message == "2 assertion(s) failed"
        assert list(result.failures) == ["b: boom", "c: bang"]

    async def test_crashed_browser(self, runner: UnitTestRunner) -> None:
        """A non-zero exit without failures reports the exit status."""
        with patch.object(
            UnitTestRunner,
            "execute",
            new_callable=AsyncMock,
            return_value=BrowserReport(returncode=2, stderr="segfault"),
        ):
            result = await runner.run()

        assert result.status == "failure"
        assert result.message == "Browser exited with status 2: segfault"

    async def test_timeout(self, runner: UnitTestRunner) -> None:
        """A timeout is reported as such."""
        with patch.object(
            UnitTestRunner,
            "execute",
            new_callable=AsyncMock,
            side_effect=TimeoutError("Browser did not finish within 1 seconds"),
        ):
            result = await runner.run()

        assert result.status == "timeout"
        assert "did not finish" in (result.message or "")

    async def test_missing_browser(self, runner: UnitTestRunner) -> None:
        """A browser that cannot start is an error."""
        with patch.object(
            UnitTestRunner,
            "execute",
            new_callable=AsyncMock,
            side_effect=FileNotFoundError("casperjs"),
        ):
            result = await runner.run()

        assert result.status == "error"
        assert result.message == "casperjs"

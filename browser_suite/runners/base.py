"""Abstract base class for single-file test runners."""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from browser_suite.application import Application
from browser_suite.config import SuiteConfig
from browser_suite.models.result import TestCategory, TestResult
from browser_suite.runners.browser import BrowserReport

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestRunner(ABC):
    """Executes exactly one test file and reports its outcome.

    Runners are created fresh for every suite run and never reused. The file
    list always holds a single path relative to the application root.
    """

    __test__ = False

    category: ClassVar[TestCategory]

    app: Application
    files: Sequence[str]
    config: SuiteConfig

    def __post_init__(self) -> None:
        if len(self.files) != 1:
            raise ValueError(
                f"{type(self).__name__} runs exactly one file, got {len(self.files)}"
            )

    @property
    def file(self) -> str:
        """The test file this runner executes."""
        return self.files[0]

    async def run(self) -> TestResult:
        """Execute the test file and time it.

        Assertion failures, timeouts and automation crashes are reported in
        the returned result rather than raised.
        """
        start = time.monotonic()
        try:
            report = await self.execute()
        except TimeoutError as e:
            return self.result(
                status="timeout", duration=time.monotonic() - start, message=str(e)
            )
        except (OSError, RuntimeError) as e:
            log.error("Runner for %s could not start: %s", self.file, e)
            return self.result(
                status="error", duration=time.monotonic() - start, message=str(e)
            )
        return self.report_result(report, time.monotonic() - start)

    @abstractmethod
    async def execute(self) -> BrowserReport:
        """Drive the browser for this file and return its scraped report.

        Raises:
            TimeoutError: If the browser or a server does not finish in time
            OSError: If a required process cannot be started
            RuntimeError: If a required process dies early

        """

    def result(self, **kwargs: Any) -> TestResult:
        """Build a result for this runner's file."""
        return TestResult(file=self.file, category=self.category, **kwargs)

    def report_result(self, report: BrowserReport, duration: float) -> TestResult:
        """Map a browser report to a result."""
        if report.succeeded:
            return self.result(status="success", duration=duration)

        if report.failures:
            message = f"{len(report.failures)} assertion(s) failed"
        else:
            message = f"Browser exited with status {report.returncode}"
            if report.stderr:
                message = f"{message}: {report.stderr}"

        return self.result(
            status="failure",
            duration=duration,
            message=message,
            failures=tuple(report.failures),
        )

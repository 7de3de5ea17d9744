"""Test suite controller.

The suite supports two kinds of tests:

1. Integration tests, which need a running application server.
2. Unit tests, which run in a generated QUnit harness without a server.

A run goes through setup, run and teardown. Setup compiles the application
and, when there are unit tests, stages the unit test root. Running invokes
one runner per file, unit runners first, strictly one at a time. Teardown
always runs, whatever happened before it.
"""

import logging
from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path

from browser_suite.application import Application
from browser_suite.classifier import Classification, classify, relativize
from browser_suite.compilers import CommandScriptCompiler
from browser_suite.config import SuiteConfig
from browser_suite.models.result import TestResult
from browser_suite.pipeline import PipelineStager
from browser_suite.runners.base import TestRunner
from browser_suite.runners.factory import RunnerFactory

log = logging.getLogger(__name__)


class SuiteState(StrEnum):
    """Lifecycle of a suite run."""

    IDLE = "idle"
    SETUP = "setup"
    RUNNING = "running"
    SKIPPED_RUN = "skipped_run"
    TEARDOWN = "teardown"
    DONE = "done"


class TestSuite:
    """Classifies, stages and runs a set of test files for one application."""

    __test__ = False

    def __init__(
        self,
        app: Application,
        files: Sequence[str | Path],
        config: SuiteConfig | None = None,
        *,
        stager: PipelineStager | None = None,
        runner_factory: RunnerFactory | None = None,
    ) -> None:
        self.app = app
        self.config = config or SuiteConfig()
        self.files: Sequence[str] = tuple(relativize(files, app.root))
        self.stager = stager or PipelineStager(
            compiler=CommandScriptCompiler(command=self.config.script_compiler),
            integration_marker=self.config.integration_marker,
        )
        self.runner_factory = runner_factory or RunnerFactory(
            app=app, config=self.config
        )
        self.state = SuiteState.IDLE
        self._classification: Classification = classify(
            self.files, self.config.integration_marker
        )
        self._results: list[TestResult] = []

    @property
    def unit_tests(self) -> Sequence[str]:
        """Files routed to the unit runner."""
        return self._classification.unit

    @property
    def integration_tests(self) -> Sequence[str]:
        """Files routed to the integration runner."""
        return self._classification.integration

    @property
    def test_root(self) -> Path:
        """Directory the unit test root is staged into."""
        return self.app.root / self.config.test_root

    @property
    def results(self) -> Sequence[TestResult]:
        """Results recorded so far, in runner invocation order."""
        return tuple(self._results)

    @property
    def passed(self) -> bool:
        """Whether the completed run had no failing result."""
        return self.state == SuiteState.DONE and all(r.passed for r in self._results)

    def runners(self) -> Sequence[TestRunner]:
        """Fresh runners for every file, unit runners first."""
        return self.runner_factory.build_runners(
            self.unit_tests, self.integration_tests
        )

    async def run(self) -> Sequence[TestResult]:
        """Set up, run every test unless this is a dry run, then tear down.

        Returns:
            Results in runner invocation order; empty on a dry run

        Raises:
            CompileError: If the application does not compile
            StagingError: If the unit test root cannot be built

        """
        self._results = []
        try:
            await self.setup()
            runners = self.runners()
            if self.config.dry_run:
                self.state = SuiteState.SKIPPED_RUN
                log.info("Dry run: %d runner(s) prepared, none invoked", len(runners))
            else:
                self.state = SuiteState.RUNNING
                await self._run_all(runners)
        finally:
            self.state = SuiteState.TEARDOWN
            await self.teardown()

        self.state = SuiteState.DONE
        return self.results

    async def setup(self) -> None:
        """Compile the application and stage the unit test root if needed."""
        self.state = SuiteState.SETUP
        log.info(
            "Setting up suite: %d unit test(s), %d integration test(s)",
            len(self.unit_tests),
            len(self.integration_tests),
        )
        await self.app.compile()

        if self.unit_tests:
            await self.stager.stage(self.app.root, self.app.site_path, self.test_root)
        else:
            log.info("No unit tests, skipping test root staging")

    async def teardown(self) -> None:
        """Release resources acquired during setup."""

    async def _run_all(self, runners: Sequence[TestRunner]) -> None:
        for runner in runners:
            result = await self._invoke(runner)
            log.info(
                "Test completed: file=%s category=%s status=%s duration=%.1fs",
                result.file,
                result.category,
                result.status,
                result.duration,
            )
            self._results.append(result)

    async def _invoke(self, runner: TestRunner) -> TestResult:
        try:
            return await runner.run()
        except Exception as e:
            log.error("Runner for %s crashed: %s", runner.file, e, exc_info=e)
            return runner.result(status="error", duration=0.0, message=str(e))

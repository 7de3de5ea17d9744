"""Creation of one runner per classified test file."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from browser_suite.application import Application
from browser_suite.config import SuiteConfig
from browser_suite.runners.base import TestRunner
from browser_suite.runners.integration import IntegrationTestRunner
from browser_suite.runners.unit import UnitTestRunner

RunnerCls = Callable[..., TestRunner]


@dataclass(frozen=True, kw_only=True)
class RunnerFactory:
    """Builds runners for the unit and integration subsets of a suite."""

    app: Application
    config: SuiteConfig
    unit_runner_cls: RunnerCls = UnitTestRunner
    integration_runner_cls: RunnerCls = IntegrationTestRunner

    def build_runners(
        self,
        unit_files: Sequence[str],
        integration_files: Sequence[str],
    ) -> Sequence[TestRunner]:
        """Return one runner per file, unit runners first.

        Unit tests are cheap and need no server, so they run before the
        integration tests. Each group keeps its input order.
        """
        unit = [
            self.unit_runner_cls(app=self.app, files=[file], config=self.config)
            for file in unit_files
        ]
        integration = [
            self.integration_runner_cls(app=self.app, files=[file], config=self.config)
            for file in integration_files
        ]
        return [*unit, *integration]

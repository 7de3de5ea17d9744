"""Single-file test runners."""

from browser_suite.runners.base import TestRunner
from browser_suite.runners.factory import RunnerFactory
from browser_suite.runners.integration import IntegrationTestRunner
from browser_suite.runners.unit import UnitTestRunner

__all__ = ["IntegrationTestRunner", "RunnerFactory", "TestRunner", "UnitTestRunner"]

"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Literal

TestStatus = Literal["success", "failure", "timeout", "error"]


class TestCategory(StrEnum):
    """Execution category a test file is routed to."""

    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Outcome of one runner invocation for a single test file."""

    __test__ = False

    file: str
    category: TestCategory
    status: TestStatus
    duration: float
    message: str | None = None
    failures: Sequence[str] = field(default_factory=tuple)

    @property
    def passed(self) -> bool:
        """Whether the file passed."""
        return self.status == "success"

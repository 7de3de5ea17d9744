"""Headless browser process handling shared by both runner kinds.

The browser command is expected to print one line per test case:

    PASS: <test name>
    FAIL: <test name>: <message>

Anything else on stdout is ignored.
"""

import asyncio
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

REPORT_LINE = re.compile(r"^(?P<outcome>PASS|FAIL):\s*(?P<detail>.*)$")


@dataclass(frozen=True, kw_only=True)
class BrowserReport:
    """Scraped output of one browser run."""

    returncode: int
    passes: Sequence[str] = field(default_factory=tuple)
    failures: Sequence[str] = field(default_factory=tuple)
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether the browser exited cleanly with no failing assertions."""
        return self.returncode == 0 and not self.failures


def parse_report(output: str) -> tuple[Sequence[str], Sequence[str]]:
    """Split browser output into passing and failing test descriptions."""
    passes: list[str] = []
    failures: list[str] = []
    for line in output.splitlines():
        if (match := REPORT_LINE.match(line.strip())) is None:
            continue
        if match["outcome"] == "PASS":
            passes.append(match["detail"])
        else:
            failures.append(match["detail"])
    return passes, failures


async def run_browser(
    command: Sequence[str],
    target: str,
    timeout: float,
    extra_args: Sequence[str] = (),
) -> BrowserReport:
    """Run the headless browser against ``target`` and scrape its report.

    Args:
        command: Browser command prefix
        target: Harness file or test script handed to the browser
        timeout: Seconds to wait before the process is killed
        extra_args: Arguments appended after the target

    Raises:
        TimeoutError: If the browser does not finish within ``timeout``
        FileNotFoundError: If the browser executable is missing

    """
    log.debug("Launching browser: %s %s", " ".join(command), target)
    process = await asyncio.create_subprocess_exec(
        *command,
        target,
        *extra_args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except TimeoutError:
        process.kill()
        await process.wait()
        raise TimeoutError(
            f"Browser did not finish within {timeout} seconds"
        ) from None

    passes, failures = parse_report(stdout.decode(errors="replace"))
    return BrowserReport(
        returncode=process.returncode or 0,
        passes=passes,
        failures=failures,
        stderr=stderr.decode(errors="replace").strip(),
    )

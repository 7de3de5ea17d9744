"""Runner for integration tests executed against a live application server."""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import aiohttp

from browser_suite.config import ServerConfig
from browser_suite.models.result import TestCategory
from browser_suite.runners.base import TestRunner
from browser_suite.runners.browser import BrowserReport, run_browser

log = logging.getLogger(__name__)

STOP_TIMEOUT = 10.0
READY_POLL_INTERVAL = 0.25


async def wait_until_ready(
    server: ServerConfig, process: asyncio.subprocess.Process
) -> None:
    """Poll the server URL until it answers any HTTP response.

    Raises:
        TimeoutError: If the server does not answer within its startup timeout
        RuntimeError: If the server process exits before answering

    """
    deadline = asyncio.get_running_loop().time() + server.startup_timeout
    timeout = aiohttp.ClientTimeout(total=READY_POLL_INTERVAL * 4)

    async with aiohttp.ClientSession(timeout=timeout) as session:
        while True:
            if process.returncode is not None:
                raise RuntimeError(
                    f"Server exited with status {process.returncode} before starting"
                )

            try:
                async with session.get(server.url):
                    return
            except (aiohttp.ClientError, TimeoutError):
                pass

            if asyncio.get_running_loop().time() >= deadline:
                raise TimeoutError(
                    f"Server did not start within {server.startup_timeout} seconds"
                )

            await asyncio.sleep(READY_POLL_INTERVAL)


async def stop_server(process: asyncio.subprocess.Process) -> None:
    """Terminate the server process, killing it if it does not exit."""
    if process.returncode is not None:
        return

    process.terminate()
    try:
        await asyncio.wait_for(process.wait(), STOP_TIMEOUT)
    except TimeoutError:
        log.warning("Server pid=%d ignored SIGTERM, killing it", process.pid)
        process.kill()
        await process.wait()


@dataclass(frozen=True, kw_only=True)
class IntegrationTestRunner(TestRunner):
    """Runs one integration test file against a freshly started server.

    The server lives exactly as long as this runner's invocation.
    """

    category = TestCategory.INTEGRATION

    @asynccontextmanager
    async def live_server(self) -> AsyncGenerator[ServerConfig, None]:
        """Start the application server and stop it on exit."""
        server = self.app.server
        log.info("Starting application server on %s", server.url)
        process = await asyncio.create_subprocess_exec(
            *server.command,
            cwd=self.app.root,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            await wait_until_ready(server, process)
            yield server
        finally:
            await stop_server(process)
            log.info("Application server stopped")

    async def execute(self) -> BrowserReport:
        """Run the test script in the browser against the live server."""
        async with self.live_server() as server:
            log.info("Running integration test %s", self.file)
            return await run_browser(
                self.config.browser.command,
                str(self.app.root / self.file),
                self.config.browser.timeout,
                extra_args=(f"--url={server.url}",),
            )

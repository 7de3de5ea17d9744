"""The application under test, as seen by the suite."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from browser_suite.config import ApplicationConfig, ServerConfig
from browser_suite.errors import CompileError

log = logging.getLogger(__name__)


class Application(Protocol):
    """Application collaborator consumed by the suite and its runners."""

    @property
    def root(self) -> Path:
        """Application root directory."""

    @property
    def site_path(self) -> Path:
        """Directory holding the compiled site assets."""

    @property
    def server(self) -> ServerConfig:
        """How to start a live instance of the application."""

    async def compile(self) -> None:
        """Compile the application assets into ``site_path``.

        Raises:
            CompileError: If compilation fails

        """


@dataclass(frozen=True, kw_only=True)
class CommandApplication:
    """Application compiled by running a shell command in its root."""

    root: Path
    config: ApplicationConfig

    @property
    def site_path(self) -> Path:
        """Compiled site directory inside the root."""
        return self.root / self.config.site_dir

    @property
    def server(self) -> ServerConfig:
        """Server settings for integration tests."""
        return self.config.server

    @property
    def compile_command(self) -> Sequence[str]:
        """Command used to compile the application."""
        return self.config.compile_command

    async def compile(self) -> None:
        """Run the compile command and wait for it to finish."""
        log.info("Compiling application in %s", self.root)
        try:
            process = await asyncio.create_subprocess_exec(
                *self.compile_command,
                cwd=self.root,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise CompileError(
                f"Compile command not found: {self.compile_command[0]}"
            ) from e

        _, stderr = await process.communicate()

        if process.returncode != 0:
            raise CompileError(
                f"Application compile failed ({process.returncode}): "
                f"{stderr.decode().strip()}"
            )
        log.info("Application compiled into %s", self.site_path)

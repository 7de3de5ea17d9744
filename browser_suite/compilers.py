"""Compilation of test scripts written in a higher-level dialect."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from browser_suite.errors import ScriptCompileError

log = logging.getLogger(__name__)


class ScriptCompiler(Protocol):
    """Compiles one source file and returns the JavaScript output."""

    async def compile(self, source: Path) -> str:
        """Compile ``source`` and return the generated JavaScript."""


@dataclass(frozen=True, kw_only=True)
class CommandScriptCompiler:
    """Compile scripts by running an external compiler that prints to stdout."""

    command: Sequence[str] = ("coffee", "--print", "--compile")

    async def compile(self, source: Path) -> str:
        """Run the compiler on ``source``."""
        log.debug("Compiling %s", source)
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                str(source),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise ScriptCompileError(
                f"Script compiler not found: {self.command[0]}"
            ) from e

        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            raise ScriptCompileError(
                f"Failed to compile {source}: {stderr.decode().strip()}"
            )

        return stdout.decode()

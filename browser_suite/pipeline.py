"""Staging of the unit test root from the application tree.

The test root is what unit test harnesses load in the browser. It is built
by an ordered table of rules, each pairing a glob pattern (relative to the
application root) with a transform:

1. ``test/**/*.coffee`` is compiled to JavaScript next to its source path.
2. ``test/**/*_test.js`` is copied as is.
3. ``test/support/**/*.js`` is copied as is.
4. ``<site dir>/**/*`` is copied with the site directory name stripped, so
   compiled application assets land at the top of the test root.

A file may match several rules and then yields one artifact per match.
Files that match no rule are left out of the test root, and so are
integration tests: the ``test/`` rules skip anything under the integration
marker directory.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from browser_suite.classifier import DEFAULT_INTEGRATION_MARKER, is_integration_test
from browser_suite.compilers import ScriptCompiler
from browser_suite.errors import ScriptCompileError, StagingError

log = logging.getLogger(__name__)


class Transform(ABC):
    """Produces one artifact in the test root from one source file."""

    @abstractmethod
    async def apply(
        self, source: Path, relative: PurePosixPath, test_root: Path
    ) -> Path:
        """Write the artifact for ``source`` and return its path."""


@dataclass(frozen=True, kw_only=True)
class CompileScript(Transform):
    """Compile a script and write it with the target extension."""

    compiler: ScriptCompiler
    extension: str = ".js"

    async def apply(
        self, source: Path, relative: PurePosixPath, test_root: Path
    ) -> Path:
        """Compile ``source`` into the test root."""
        output = _prepare(test_root / relative.with_suffix(self.extension))
        output.write_text(await self.compiler.compile(source))
        return output


@dataclass(frozen=True, kw_only=True)
class Copy(Transform):
    """Copy the file byte for byte to the same relative path."""

    async def apply(
        self, source: Path, relative: PurePosixPath, test_root: Path
    ) -> Path:
        """Copy ``source`` into the test root."""
        output = _prepare(test_root / relative)
        shutil.copyfile(source, output)
        return output


@dataclass(frozen=True, kw_only=True)
class CopyWithRewrite(Transform):
    """Copy the file byte for byte to a rewritten relative path."""

    rewrite: Callable[[PurePosixPath], PurePosixPath]

    async def apply(
        self, source: Path, relative: PurePosixPath, test_root: Path
    ) -> Path:
        """Copy ``source`` into the test root under its rewritten path."""
        output = _prepare(test_root / self.rewrite(relative))
        shutil.copyfile(source, output)
        return output


def strip_leading_directory(name: str) -> Callable[[PurePosixPath], PurePosixPath]:
    """Build a rewrite that drops ``name`` from the front of a path."""

    def _rewrite(path: PurePosixPath) -> PurePosixPath:
        if path.parts and path.parts[0] == name:
            return PurePosixPath(*path.parts[1:])
        return path

    return _rewrite


@dataclass(frozen=True, kw_only=True)
class PipelineRule:
    """Glob pattern relative to the application root and its transform.

    Rules with ``unit_only`` set never stage integration test files.
    """

    pattern: str
    transform: Transform
    unit_only: bool = False


def build_rules(
    site_dir_name: str, compiler: ScriptCompiler
) -> Sequence[PipelineRule]:
    """Return the rule table for a unit test root."""
    return (
        PipelineRule(
            pattern="test/**/*.coffee",
            transform=CompileScript(compiler=compiler),
            unit_only=True,
        ),
        PipelineRule(pattern="test/**/*_test.js", transform=Copy(), unit_only=True),
        PipelineRule(
            pattern="test/support/**/*.js", transform=Copy(), unit_only=True
        ),
        PipelineRule(
            pattern=f"{site_dir_name}/**/*",
            transform=CopyWithRewrite(rewrite=strip_leading_directory(site_dir_name)),
        ),
    )


def _prepare(output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    return output


def _enumerate(root: Path, pattern: str) -> Sequence[Path]:
    return sorted(path for path in root.glob(pattern) if path.is_file())


def _check_test_root(app_root: Path, test_root: Path) -> None:
    root = app_root.resolve()
    target = test_root.resolve()
    if target == root or not target.is_relative_to(root):
        raise StagingError(
            f"Test root {test_root} must be a directory inside {app_root}"
        )


@dataclass(frozen=True, kw_only=True)
class PipelineStager:
    """Builds the unit test root by running every rule over the app tree."""

    compiler: ScriptCompiler
    rules: Sequence[PipelineRule] | None = None
    integration_marker: Sequence[str] = DEFAULT_INTEGRATION_MARKER

    def rules_for(self, site_path: Path) -> Sequence[PipelineRule]:
        """Rules in effect for an application with the given site output."""
        if self.rules is not None:
            return self.rules
        return build_rules(site_path.name, self.compiler)

    async def stage(self, app_root: Path, site_path: Path, test_root: Path) -> None:
        """Rebuild ``test_root`` from ``app_root``.

        Any previous contents of the test root are removed first. The
        application tree is only read.

        Raises:
            StagingError: If the test root is not strictly inside the application
                root, or if any transform fails; the test root is then unusable

        """
        _check_test_root(app_root, test_root)
        rules = self.rules_for(site_path)
        log.info("Staging unit test root at %s", test_root)

        try:
            if test_root.exists():
                shutil.rmtree(test_root)
            test_root.mkdir(parents=True)
        except OSError as e:
            raise StagingError(f"Cannot reset test root {test_root}: {e}") from e

        staged = 0
        for rule in rules:
            sources = _enumerate(app_root, rule.pattern)
            log.debug("Rule %s matched %d file(s)", rule.pattern, len(sources))
            for source in sources:
                relative = PurePosixPath(source.relative_to(app_root).as_posix())
                if rule.unit_only and is_integration_test(
                    relative.as_posix(), self.integration_marker
                ):
                    log.debug("Skipping integration test %s", relative)
                    continue
                try:
                    output = await rule.transform.apply(source, relative, test_root)
                except (OSError, ScriptCompileError) as e:
                    raise StagingError(
                        f"Failed to stage {relative} ({rule.pattern}): {e}"
                    ) from e
                log.debug("Staged %s -> %s", relative, output)
                staged += 1

        log.info("Staged %d artifact(s) into %s", staged, test_root)

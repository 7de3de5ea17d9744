"""CLI entry point for running browser test suites."""

import argparse
import asyncio
import glob
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from browser_suite.application import CommandApplication
from browser_suite.config import load_suite_config
from browser_suite.errors import ConfigError, SetupError
from browser_suite.models.result import TestResult
from browser_suite.suite import TestSuite

STATUS_SYMBOLS = {
    "success": "✓",
    "failure": "✗",
    "error": "!",
    "timeout": "⏱",
}


def expand_patterns(root: Path, patterns: Sequence[str]) -> Sequence[str]:
    """Expand file globs relative to the application root.

    Matches keep pattern order and are de-duplicated; directories are skipped.
    """
    log = logging.getLogger("browser_suite")
    files: dict[str, None] = {}

    for pattern in patterns:
        if Path(pattern).is_absolute():
            matches = sorted(glob.glob(pattern, recursive=True))
        else:
            matches = [
                str(root / match)
                for match in sorted(glob.glob(pattern, root_dir=root, recursive=True))
            ]
        matches = [match for match in matches if Path(match).is_file()]
        if not matches:
            log.warning("No test files match %s", pattern)
        for match in matches:
            files.setdefault(match, None)

    return list(files)


def log_results_summary(log: logging.Logger, results: Sequence[TestResult]) -> None:
    """Log a formatted summary of test results."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for result in results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s [%s]: %s (%.2fs)",
            symbol,
            result.file,
            result.category,
            result.status,
            result.duration,
        )
        if result.message:
            log.info("  Message: %s", result.message)
        for failure in result.failures:
            log.info("  Failed: %s", failure)


def format_output(
    results: Sequence[TestResult], error: str | None = None
) -> dict[str, Any]:
    """Format results for JSON output."""
    all_results = [
        {
            "file": result.file,
            "category": str(result.category),
            "status": result.status,
            "duration": result.duration,
            "message": result.message,
            "failures": list(result.failures),
        }
        for result in results
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "success"),
        "failed": sum(1 for r in all_results if r["status"] == "failure"),
        "errors": sum(1 for r in all_results if r["status"] == "error"),
        "timeouts": sum(1 for r in all_results if r["status"] == "timeout"),
        "error": error,
        "results": all_results,
    }


async def run(
    root: Path,
    patterns: Sequence[str],
    dry_run: bool = False,
    config_file: Path | None = None,
) -> int:
    """Run the selected tests and return the exit code."""
    log = logging.getLogger("browser_suite")

    overrides = {"dry_run": True} if dry_run else None
    try:
        config = load_suite_config(root, overrides=overrides, config_file=config_file)
    except ConfigError as e:
        log.error("%s", e)
        print(json.dumps(format_output([], error=str(e)), indent=2))
        return 1

    files = expand_patterns(root, patterns)
    if not files:
        log.info("No test files selected")
        print(json.dumps(format_output([]), indent=2))
        return 0

    app = CommandApplication(root=root, config=config.application)
    suite = TestSuite(app, files, config)

    try:
        results = await suite.run()
    except SetupError as e:
        log.error("Suite setup failed: %s", e)
        print(json.dumps(format_output([], error=str(e)), indent=2))
        return 1

    if config.dry_run:
        log.info("Dry run complete, %d test file(s) ready", len(suite.files))
    else:
        log_results_summary(log, results)

    print(json.dumps(format_output(results), indent=2))

    return 0 if suite.passed else 1


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run unit and integration tests in a headless browser"
    )
    parser.add_argument(
        "patterns",
        nargs="+",
        metavar="PATTERN",
        help="Test file globs, e.g. 'test/**/*_test.*'",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Application root directory (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Suite configuration file (default: <root>/suite.yaml)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compile and stage without running any test",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            root=args.root.resolve(),
            patterns=args.patterns,
            dry_run=args.dry_run,
            config_file=args.config,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

"""Runner for unit tests executed in a generated QUnit harness."""

import html
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from browser_suite.models.result import TestCategory
from browser_suite.runners.base import TestRunner
from browser_suite.runners.browser import BrowserReport, run_browser

log = logging.getLogger(__name__)

HARNESS_DIR = "harness"

HARNESS_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
{stylesheets}
</head>
<body>
<div id="qunit"></div>
<div id="qunit-fixture"></div>
{scripts}
</body>
</html>
"""


def staged_script_path(file: str) -> PurePosixPath:
    """Path of a test file's JavaScript inside the test root."""
    return PurePosixPath(file).with_suffix(".js")


def _relative_assets(test_root: Path, suffix: str) -> Sequence[str]:
    """Staged site assets, i.e. everything outside the staged ``test`` tree."""
    assets: list[str] = []
    for path in sorted(test_root.rglob(f"*{suffix}")):
        relative = path.relative_to(test_root)
        if path.is_file() and relative.parts[0] not in ("test", HARNESS_DIR):
            assets.append(relative.as_posix())
    return assets


def render_harness(
    title: str,
    stylesheets: Sequence[str],
    scripts: Sequence[str],
) -> str:
    """Render the HTML page that loads QUnit, the app and one test."""
    return HARNESS_TEMPLATE.format(
        title=html.escape(title),
        stylesheets="\n".join(
            f'<link rel="stylesheet" href="{html.escape(href)}">'
            for href in stylesheets
        ),
        scripts="\n".join(
            f'<script src="{html.escape(src)}"></script>' for src in scripts
        ),
    )


@dataclass(frozen=True, kw_only=True)
class UnitTestRunner(TestRunner):
    """Runs one unit test file against the staged test root.

    No application server is involved: the browser opens a generated harness
    that loads QUnit, the compiled site assets, the support scripts and the
    test script from the test root.
    """

    category = TestCategory.UNIT

    @property
    def test_root(self) -> Path:
        """Staged test root for the application."""
        return self.app.root / self.config.test_root

    def write_harness(self) -> Path:
        """Write the harness page for this runner's file and return its path."""
        root = self.test_root
        script = staged_script_path(self.file)
        if not (root / script).is_file():
            raise FileNotFoundError(f"Staged test script not found: {script}")

        support = [
            path.relative_to(root).as_posix()
            for path in sorted((root / "test" / "support").rglob("*.js"))
            if path.is_file()
        ]
        # Harness pages live one directory below the test root.
        up = "../"
        page = render_harness(
            title=self.file,
            stylesheets=[self.config.qunit_css]
            + [up + css for css in _relative_assets(root, ".css")],
            scripts=[self.config.qunit_js]
            + [up + js for js in _relative_assets(root, ".js")]
            + [up + js for js in support if js != script.as_posix()]
            + [up + script.as_posix()],
        )

        harness = root / HARNESS_DIR / f"{script.as_posix().replace('/', '__')}.html"
        harness.parent.mkdir(parents=True, exist_ok=True)
        harness.write_text(page)
        log.debug("Wrote harness %s", harness)
        return harness

    async def execute(self) -> BrowserReport:
        """Open the harness in the headless browser."""
        harness = self.write_harness()
        log.info("Running unit test %s", self.file)
        return await run_browser(
            self.config.browser.command,
            str(harness),
            self.config.browser.timeout,
        )

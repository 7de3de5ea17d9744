"""Fixtures for tests that launch real processes."""

import socket
import sys
import textwrap
from collections.abc import Sequence
from pathlib import Path

import pytest

FAKE_BROWSER = textwrap.dedent(
    """
    import re
    import sys
    from pathlib import Path

    target = Path(sys.argv[1])
    args = sys.argv[2:]
    name = target.name

    if target.suffix == ".html":
        scripts = re.findall(r'<script src="([^"]+)"', target.read_text())
        script = target.parent / scripts[-1]
        name = script.name
        source = script.read_text()
    else:
        source = target.read_text()
        if not any(arg.startswith("--url=http://") for arg in args):
            print("FAIL: missing server url")
            sys.exit(1)

    if "HANG" in source:
        import time
        time.sleep(60)

    if "FAIL" in source:
        print("FAIL: " + name + ": assertion failed")
        sys.exit(1)

    print("PASS: " + name)
    """
)


@pytest.fixture
def browser_command(tmp_path: Path) -> Sequence[str]:
    """Command for a stand-in browser that scrapes the test source.

    Harness pages are resolved to their last script. A test fails if its
    source contains ``FAIL`` and hangs if it contains ``HANG``.
    """
    script = tmp_path / "fake_browser.py"
    script.write_text(FAKE_BROWSER)
    return [sys.executable, str(script)]


@pytest.fixture
def free_port() -> int:
    """A TCP port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]

"""Shared fixtures for suite tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from browser_suite.testing.fakes import FakeApplication, FakeCompiler

WriteFn = Callable[..., Path]


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """Empty application root."""
    root = tmp_path / "app"
    root.mkdir()
    return root


@pytest.fixture
def write_file(app_root: Path) -> WriteFn:
    """Return a function that writes a file relative to the app root."""

    def _write(relative: str, content: str = "") -> Path:
        path = app_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def app(app_root: Path) -> FakeApplication:
    """Fake application rooted at the app root."""
    return FakeApplication(root=app_root)


@pytest.fixture
def compiler() -> FakeCompiler:
    """Fake script compiler."""
    return FakeCompiler()

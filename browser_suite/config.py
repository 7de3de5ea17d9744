"""Configuration for the test suite and its collaborators."""

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import Field, ValidationError, field_validator

from browser_suite.errors import ConfigError
from browser_suite.models.base import Model

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "suite.yaml"

ConfigT = TypeVar("ConfigT", bound=Model)


class BrowserConfig(Model):
    """Headless browser used by both runner kinds."""

    command: Sequence[str] = Field(
        default=("casperjs", "test"),
        min_length=1,
        description="Command prefix; the harness path or test file is appended",
    )
    timeout: float = Field(default=120.0, gt=0, description="Seconds per test file")


class ServerConfig(Model):
    """Live application server started for each integration test."""

    command: Sequence[str] = Field(
        default=("iridium", "server"),
        min_length=1,
        description="Command that starts the application server in the foreground",
    )
    host: str = "127.0.0.1"
    port: int = Field(default=9293, gt=0, lt=65536)
    startup_timeout: float = Field(default=30.0, gt=0)

    @property
    def url(self) -> str:
        """Base URL the server answers on."""
        return f"http://{self.host}:{self.port}"


class ApplicationConfig(Model):
    """How the application under test compiles itself."""

    site_dir: str = Field(default="site", description="Compiled asset directory")
    compile_command: Sequence[str] = Field(
        default=("iridium", "compile"),
        min_length=1,
        description="Command run in the application root before any test",
    )
    server: ServerConfig = Field(default_factory=ServerConfig)


class SuiteConfig(Model):
    """Complete configuration handed to every suite component."""

    dry_run: bool = False
    test_root: Path = Field(
        default=Path("tmp", "test_root"),
        description="Staging directory, relative to the application root",
    )
    integration_marker: Sequence[str] = ("test", "integration")
    script_compiler: Sequence[str] = ("coffee", "--print", "--compile")
    qunit_js: str = "https://code.jquery.com/qunit/qunit-1.23.1.js"
    qunit_css: str = "https://code.jquery.com/qunit/qunit-1.23.1.css"
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    application: ApplicationConfig = Field(default_factory=ApplicationConfig)

    @field_validator("test_root")
    @classmethod
    def _inside_app_root(cls, value: Path) -> Path:
        if value.is_absolute():
            raise ValueError("test_root must be relative to the application root")
        if not value.parts or ".." in value.parts:
            raise ValueError("test_root must be a subdirectory of the application root")
        return value


def _deep_merge(
    base: Mapping[str, Any], overrides: Mapping[str, Any]
) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_config(
    base: ConfigT, overrides: Mapping[str, Any]
) -> ConfigT:
    """Return a new config with ``overrides`` deep-merged over ``base``.

    Nested sections are merged key by key, so overriding ``browser.timeout``
    keeps the configured ``browser.command``. The base instance is left as is.

    Raises:
        ConfigError: If the merged values do not validate

    """
    data = _deep_merge(base.model_dump(), overrides)
    try:
        return type(base).model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_suite_config(
    app_root: Path,
    overrides: Mapping[str, Any] | None = None,
    config_file: Path | None = None,
) -> SuiteConfig:
    """Load the suite configuration for an application.

    Args:
        app_root: Application root directory
        overrides: Values merged over the file contents (e.g. CLI flags)
        config_file: Explicit config file; defaults to ``suite.yaml`` in the root

    Returns:
        Validated suite configuration

    Raises:
        ConfigError: If the file is malformed or contains invalid values

    """
    path = config_file or app_root / CONFIG_FILE_NAME
    data: Mapping[str, Any] = {}

    if path.is_file():
        log.info("Loading suite configuration from %s", path)
        try:
            loaded = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if loaded is not None and not isinstance(loaded, Mapping):
            raise ConfigError(f"Expected a mapping in {path}")
        data = loaded or {}
    elif config_file is not None:
        raise ConfigError(f"Config file not found: {config_file}")

    try:
        config = SuiteConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    if overrides:
        config = merge_config(config, overrides)
    return config

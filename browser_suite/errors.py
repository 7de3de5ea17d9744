"""Exceptions raised by the test suite."""


class SuiteError(Exception):
    """Base class for all suite errors."""


class SetupError(SuiteError):
    """Raised when suite setup fails; no test is run afterwards."""


class CompileError(SetupError):
    """Raised when the application fails to compile its sources."""


class StagingError(SetupError):
    """Raised when a pipeline transform fails while building the test root."""


class ScriptCompileError(SuiteError):
    """Raised when a test script cannot be compiled to JavaScript."""


class ConfigError(SuiteError, ValueError):
    """Raised when the suite configuration cannot be loaded or validated."""

"""Route test files to the unit or integration category by path."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

DEFAULT_INTEGRATION_MARKER = ("test", "integration")


@dataclass(frozen=True, kw_only=True)
class Classification:
    """Partition of the input files; both sides keep input order."""

    integration: Sequence[str]
    unit: Sequence[str]


def relativize(files: Iterable[str | Path], root: Path) -> Sequence[str]:
    """Express files relative to the application root, in posix form.

    Files outside the root are kept as given.
    """
    relative: list[str] = []
    for file in files:
        path = Path(file)
        if path.is_absolute() and path.is_relative_to(root):
            path = path.relative_to(root)
        relative.append(path.as_posix())
    return relative


def is_integration_test(
    file: str, marker: Sequence[str] = DEFAULT_INTEGRATION_MARKER
) -> bool:
    """Check whether the file lives under the integration marker directory."""
    directories = PurePosixPath(file).parent.parts
    width = len(marker)
    if width == 0:
        return False
    return any(
        tuple(directories[i : i + width]) == tuple(marker)
        for i in range(len(directories) - width + 1)
    )


def classify(
    files: Sequence[str], marker: Sequence[str] = DEFAULT_INTEGRATION_MARKER
) -> Classification:
    """Split files into integration and unit tests.

    A file is an integration test iff its directory path contains the marker
    segments (``test/integration`` by default); every other file is a unit
    test. Contents are never inspected.
    """
    integration: list[str] = []
    unit: list[str] = []
    for file in files:
        if is_integration_test(file, marker):
            integration.append(file)
        else:
            unit.append(file)
    return Classification(integration=integration, unit=unit)

"""Discovery of unit files and the pending subset."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from loguru import logger

from ..core.exceptions import DiscoveryError
from ..core.types import UnitDescriptor, UnitKind, version_key

_NUMERIC_PREFIX = re.compile(r"^\d+_")


def version_from_filename(filename: str) -> str:
    """Version token: everything before the first underscore."""
    return filename.split("_", 1)[0]


def name_from_filename(filename: str) -> str:
    """Label: the file stem without its numeric version prefix."""
    return _NUMERIC_PREFIX.sub("", Path(filename).stem)


def sort_units(units: Iterable[UnitDescriptor]) -> list[UnitDescriptor]:
    """Sort by version, then filename, independent of listing order."""
    return sorted(units, key=lambda unit: (version_key(unit.version), unit.filename))


class UnitCatalog:
    """Lists unit files of one kind and works out which are pending.

    Example:
        catalog = UnitCatalog(MIGRATIONS)
        for unit in catalog.pending(Path("migrations"), applied_versions):
            print(unit.version, unit.name)
    """

    def __init__(self, kind: UnitKind):
        """Initialize with the unit kind.

        Args:
            kind: Unit kind whose extensions are recognized.
        """
        self.kind = kind

    def is_candidate(self, path: Path) -> bool:
        """Check whether a file looks like a unit file."""
        if path.name.startswith(("_", ".")):
            return False
        return path.suffix in self.kind.extensions

    def describe(self, path: Path) -> UnitDescriptor:
        """Build the descriptor for a unit file."""
        return UnitDescriptor(
            path=path,
            version=version_from_filename(path.name),
            name=name_from_filename(path.name),
        )

    def discover(self, location: Path | str) -> list[UnitDescriptor]:
        """List every unit file at ``location``.

        Args:
            location: Directory holding unit files.

        Returns:
            Descriptors sorted by version, then filename.

        Raises:
            DiscoveryError: If the directory is missing or unreadable.
        """
        directory = Path(location)
        try:
            entries = [entry for entry in directory.iterdir() if entry.is_file()]
        except OSError as e:
            raise DiscoveryError(
                f"Cannot read {self.kind.label} directory {directory}: {e}"
            ) from e

        units = sort_units(self.describe(entry) for entry in entries if self.is_candidate(entry))
        logger.debug(f"Discovered {len(units)} {self.kind.label} file(s) in {directory}")
        return units

    def pending(
        self,
        location: Path | str,
        applied_versions: Iterable[str],
    ) -> list[UnitDescriptor]:
        """Units whose version is not in ``applied_versions``, ascending."""
        applied = set(applied_versions)
        return [unit for unit in self.discover(location) if unit.version not in applied]

    def find(self, location: Path | str, version: str) -> UnitDescriptor | None:
        """First unit file with the given version, or None."""
        for unit in self.discover(location):
            if unit.version == version:
                return unit
        return None

    def resolve(self, location: Path | str, filename: str) -> UnitDescriptor:
        """Descriptor for a named file in ``location``.

        Raises:
            DiscoveryError: If the file does not exist or is not a unit file.
        """
        path = Path(location) / filename
        if not path.is_file():
            raise DiscoveryError(f"{self.kind.label.capitalize()} file not found: {path}")
        if not self.is_candidate(path):
            raise DiscoveryError(f"Not a {self.kind.label} file: {path}")
        return self.describe(path)

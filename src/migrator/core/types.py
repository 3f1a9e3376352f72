"""Type definitions for migrator."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

_DIGITS = re.compile(r"(\d+)")


def version_key(version: str) -> tuple:
    """Sort key for unit versions.

    Digit runs compare numerically and the rest as text, so equal-width
    timestamps sort exactly as strings while "2" still precedes "10".
    The raw string breaks ties ("01" vs "1").
    """
    parts = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGITS.split(version)
        if part
    )
    return (parts, version)


@dataclass(frozen=True)
class UnitKind:
    """Configuration that distinguishes migrations from seeders.

    Attributes:
        label: Singular noun used in log and CLI output.
        table: Ledger table name.
        directory: Default directory holding unit files.
        apply_name: Name of the required apply operation on a unit.
        revert_name: Name of the optional revert operation on a unit.
        dispose_name: Name of the optional resource release operation.
        extensions: Recognized unit file extensions.
    """

    label: str
    table: str
    directory: str
    apply_name: str
    revert_name: str = "down"
    dispose_name: str = "close"
    extensions: tuple[str, ...] = (".py",)

    @property
    def plural(self) -> str:
        """Plural label for output."""
        return f"{self.label}s"


MIGRATIONS = UnitKind(
    label="migration",
    table="migrations",
    directory="migrations",
    apply_name="up",
)

SEEDERS = UnitKind(
    label="seeder",
    table="seeders",
    directory="seeders",
    apply_name="run",
)


@dataclass(frozen=True)
class UnitDescriptor:
    """A discovered unit file with its derived version and name."""

    path: Path
    version: str
    name: str

    @property
    def filename(self) -> str:
        """Base name of the unit file."""
        return self.path.name

    def __str__(self) -> str:
        return self.filename


@dataclass(frozen=True)
class LedgerEntry:
    """One applied unit as recorded in the ledger table."""

    id: int
    version: str
    name: str
    batch: int
    executed_at: Optional[datetime] = None


@dataclass
class StatusReport:
    """Applied and pending units for one kind."""

    applied: list[LedgerEntry] = field(default_factory=list)
    pending: list[UnitDescriptor] = field(default_factory=list)

    @property
    def is_up_to_date(self) -> bool:
        """True when nothing is pending."""
        return not self.pending


@dataclass
class RunResult:
    """Outcome of an apply or revert run.

    Attributes:
        units: Units processed, in execution order.
        batch: Batch number written (apply) or removed (rollback), if any.
    """

    units: list[UnitDescriptor] = field(default_factory=list)
    batch: Optional[int] = None

    @property
    def count(self) -> int:
        """Number of units processed."""
        return len(self.units)

    @property
    def versions(self) -> list[str]:
        """Versions processed, in execution order."""
        return [unit.version for unit in self.units]

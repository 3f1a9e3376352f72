"""Custom exceptions for migrator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import UnitDescriptor


class MigratorError(Exception):
    """Base exception for all migrator errors."""

    pass


class DatabaseError(MigratorError):
    """Database operation failed."""

    pass


class ConfigurationError(MigratorError):
    """Required configuration (database URL, directory) is missing or invalid."""

    pass


class DiscoveryError(MigratorError):
    """Unit directory or unit file could not be read."""

    pass


class UnitError(MigratorError):
    """A single unit failed during apply or revert.

    Attributes:
        unit: Descriptor of the failing unit.
        completed: Units that finished before the failure in the same run.
    """

    action = "process"

    def __init__(
        self,
        unit: "UnitDescriptor",
        reason: str,
        completed: list["UnitDescriptor"] | None = None,
    ):
        """Initialize exception with the failing unit and reason.

        Args:
            unit: Descriptor of the failing unit.
            reason: Human-readable cause.
            completed: Units that finished before the failure.
        """
        self.unit = unit
        self.reason = reason
        self.completed = list(completed or [])
        super().__init__(f"Failed to {self.action} {unit.filename}: {reason}")

    @property
    def version(self) -> str:
        """Version of the failing unit."""
        return self.unit.version


class UnitLoadError(UnitError):
    """Unit code could not be resolved or violates the unit contract."""

    action = "load"


class ApplyError(UnitError):
    """The unit's apply operation raised."""

    action = "apply"


class RevertError(UnitError):
    """The unit's revert operation raised."""

    action = "revert"


class LedgerError(MigratorError):
    """Writing or removing a ledger row failed.

    Attributes:
        version: Ledger version involved.
        completed: Units that finished before the failure in the same run.
    """

    def __init__(self, version: str, message: str):
        """Initialize exception with the offending version.

        Args:
            version: Ledger version involved.
            message: Description of the failure.
        """
        self.version = version
        self.completed: list["UnitDescriptor"] = []
        super().__init__(message)


class DuplicateVersionError(LedgerError):
    """Version already exists in the ledger."""

    def __init__(self, version: str, table: str):
        """Initialize exception with version and ledger table.

        Args:
            version: Version that is already recorded.
            table: Ledger table name.
        """
        self.table = table
        super().__init__(version, f"Version {version!r} is already recorded in {table!r}")

"""Revert applied units, newest version first, one transaction per unit."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..core.exceptions import (
    DatabaseError,
    LedgerError,
    RevertError,
    UnitError,
    UnitLoadError,
)
from ..core.types import LedgerEntry, RunResult, UnitDescriptor, UnitKind, version_key
from ..units.base import UnitContext
from ..units.loader import LoadedUnit, dispose_unit

if TYPE_CHECKING:
    from ..app.protocols import DatabaseProtocol, UnitLoaderProtocol
    from ..store.ledger import LedgerStore
    from ..units.catalog import UnitCatalog


def select_by_steps(applied: list[LedgerEntry], steps: int) -> list[LedgerEntry]:
    """Entries of the latest batch only, newest version first, at most ``steps``.

    A rollback never reaches into an earlier batch, even when ``steps``
    exceeds the size of the latest one.

    Raises:
        ValueError: If ``steps`` is less than 1.
    """
    if steps < 1:
        raise ValueError(f"steps must be at least 1, got {steps}")
    if not applied:
        return []

    last_batch = max(entry.batch for entry in applied)
    selected = [entry for entry in applied if entry.batch == last_batch]
    selected.sort(key=lambda entry: version_key(entry.version), reverse=True)
    return selected[:steps]


def select_all(applied: list[LedgerEntry]) -> list[LedgerEntry]:
    """Every entry, newest version first."""
    return sorted(applied, key=lambda entry: version_key(entry.version), reverse=True)


class RollbackEngine:
    """Reverts ledger entries and removes their rows.

    Each entry is resolved back to its unit file, loaded, reverted (when the
    unit has a revert operation) and erased from the ledger inside one
    transaction. A unit without a revert operation still has its ledger row
    removed. A unit whose file is gone is a hard failure: its row stays.
    """

    def __init__(
        self,
        db: "DatabaseProtocol",
        ledger: "LedgerStore",
        catalog: "UnitCatalog",
        loader: "UnitLoaderProtocol",
        kind: UnitKind,
    ):
        """Initialize RollbackEngine.

        Args:
            db: Database handle shared by ledger and units.
            ledger: Ledger of the unit kind.
            catalog: Resolves versions back to unit files.
            loader: Resolves descriptors to executable units.
            kind: Unit kind being reverted.
        """
        self.db = db
        self.ledger = ledger
        self.catalog = catalog
        self.loader = loader
        self.kind = kind

    def run(self, entries: list[LedgerEntry], location: Path | str) -> RunResult:
        """Revert ``entries`` in the given order.

        Args:
            entries: Ledger entries, already in revert order.
            location: Directory holding the unit files.

        Returns:
            RunResult listing the reverted units.

        Raises:
            DiscoveryError: If ``location`` cannot be read (nothing is reverted).
            UnitLoadError: If a unit file is missing or cannot be loaded.
            RevertError: If a unit's revert operation raises.
            LedgerError: If a ledger row cannot be removed.
        """
        by_version: dict[str, UnitDescriptor] = {}
        for unit in self.catalog.discover(location):
            by_version.setdefault(unit.version, unit)

        completed: list[UnitDescriptor] = []
        for entry in entries:
            unit = by_version.get(entry.version)
            try:
                if unit is None:
                    unit = self._missing(entry, location)
                    raise UnitLoadError(
                        unit,
                        f"no {self.kind.label} file for version {entry.version} in "
                        f"{location}; ledger entry left in place",
                    )
                self.revert_one(unit)
            except Exception as e:
                if isinstance(e, (UnitError, LedgerError)):
                    e.completed = list(completed)
                logger.error(
                    f"Rollback of {unit.filename} failed after "
                    f"{len(completed)} reverted: {e}"
                )
                raise
            completed.append(unit)

        batches = {entry.batch for entry in entries}
        logger.info(f"Rolled back {len(completed)} {self.kind.label}(s)")
        return RunResult(
            units=completed,
            batch=batches.pop() if len(batches) == 1 else None,
        )

    def revert_one(self, unit: UnitDescriptor) -> None:
        """Revert a single unit and erase its ledger row in one transaction."""
        logger.info(f"Rolling back {self.kind.label}: {unit.filename}")

        try:
            with self.db.transaction() as conn:
                loaded = self._load(unit, UnitContext(conn, self.db.schema))
                try:
                    if loaded.revert is None:
                        logger.warning(
                            f"{self.kind.label.capitalize()} {unit.filename} has no "
                            f"{self.kind.revert_name!r} operation, skipping revert"
                        )
                    else:
                        try:
                            loaded.revert()
                        except Exception as e:
                            raise RevertError(unit, str(e) or type(e).__name__) from e
                finally:
                    dispose_unit(loaded)

                self.ledger.erase(conn, unit.version)
        except DatabaseError as e:
            raise RevertError(unit, str(e)) from e

        logger.debug(f"{self.kind.label.capitalize()} {unit.filename} rolled back")

    def _missing(self, entry: LedgerEntry, location: Path | str) -> UnitDescriptor:
        filename = f"{entry.version}_{entry.name}{self.kind.extensions[0]}"
        return UnitDescriptor(path=Path(location) / filename, version=entry.version, name=entry.name)

    def _load(self, unit: UnitDescriptor, ctx: UnitContext) -> LoadedUnit:
        try:
            return self.loader.load(unit, ctx)
        except UnitLoadError:
            raise
        except Exception as e:
            raise UnitLoadError(unit, str(e) or type(e).__name__) from e

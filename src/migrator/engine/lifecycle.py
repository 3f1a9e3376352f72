"""Lifecycle operations for one unit kind: apply, rollback, reset, fresh, status."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from ..core.exceptions import DuplicateVersionError
from ..core.types import RunResult, StatusReport, UnitDescriptor, UnitKind
from ..store.ledger import LedgerStore
from ..units.catalog import UnitCatalog
from ..units.loader import FileUnitLoader
from .execution import ExecutionEngine
from .rollback import RollbackEngine, select_all, select_by_steps

if TYPE_CHECKING:
    from ..app.protocols import UnitLoaderProtocol
    from ..store.database import Database


class UnitManager:
    """Entry point for running migrations or seeders.

    One manager serves one unit kind; create one per kind against the same
    Database to manage both migrations and seeders.

    Example:

        with Database(config.require_database_url(), config.schema) as db:
            manager = UnitManager(db, config.kind(MIGRATIONS))
            result = manager.apply_pending()
            print(f"Applied {result.count} migration(s) in batch {result.batch}")
    """

    def __init__(
        self,
        db: "Database",
        kind: UnitKind,
        loader: "UnitLoaderProtocol | None" = None,
        location: Path | str | None = None,
    ):
        """Initialize UnitManager.

        Args:
            db: Connected database handle.
            kind: Unit kind (ledger table, directory, operation names).
            loader: Unit loader; defaults to loading ``.py`` files from disk.
            location: Default unit directory; defaults to ``kind.directory``.
        """
        self.db = db
        self.kind = kind
        self.location = Path(location if location is not None else kind.directory)
        self.ledger = LedgerStore(db, kind.table)
        self.catalog = UnitCatalog(kind)
        self.loader = loader if loader is not None else FileUnitLoader(kind)
        self.executor = ExecutionEngine(db, self.ledger, self.loader, kind)
        self.rollbacker = RollbackEngine(db, self.ledger, self.catalog, self.loader, kind)

    def status(self, location: Path | str | None = None) -> StatusReport:
        """Applied and pending units. Read-only: a missing ledger reads as empty."""
        with self.db.connection() as conn:
            applied = self.ledger.list_applied(conn) if self.ledger.exists(conn) else []

        pending = self.catalog.pending(
            self._location(location), [entry.version for entry in applied]
        )
        logger.debug(
            f"{self.kind.plural.capitalize()} status: "
            f"applied={len(applied)}, pending={len(pending)}"
        )
        return StatusReport(applied=applied, pending=pending)

    def pending(self, location: Path | str | None = None) -> list[UnitDescriptor]:
        """Pending units in apply order, without applying anything."""
        return self.status(location).pending

    def apply_pending(self, location: Path | str | None = None) -> RunResult:
        """Apply every pending unit as one new batch.

        Returns:
            RunResult with the applied units; empty when nothing is pending.

        Raises:
            DiscoveryError: If the unit directory cannot be read.
            UnitError: If a unit fails to load or apply (earlier units stay applied).
            LedgerError: If a ledger row cannot be written.
        """
        self.ledger.ensure_initialized()
        with self.db.connection() as conn:
            applied = self.ledger.list_applied(conn)
            batch = self.ledger.current_batch(conn) + 1

        pending = self.catalog.pending(
            self._location(location), [entry.version for entry in applied]
        )
        if not pending:
            logger.info(f"No pending {self.kind.plural}")
            return RunResult()

        return self.executor.run(pending, batch)

    def apply_unit(self, filename: str, location: Path | str | None = None) -> RunResult:
        """Apply one named unit file as its own batch.

        Raises:
            DiscoveryError: If the file does not exist.
            DuplicateVersionError: If its version is already applied.
        """
        self.ledger.ensure_initialized()
        unit = self.catalog.resolve(self._location(location), filename)
        with self.db.connection() as conn:
            applied = {entry.version for entry in self.ledger.list_applied(conn)}
            batch = self.ledger.current_batch(conn) + 1

        if unit.version in applied:
            raise DuplicateVersionError(unit.version, self.ledger.name)

        return self.executor.run([unit], batch)

    def rollback(self, location: Path | str | None = None, steps: int = 1) -> RunResult:
        """Revert up to ``steps`` units of the most recent batch.

        Raises:
            ValueError: If ``steps`` is less than 1.
            UnitError: If a unit is missing, fails to load, or fails to revert.
            LedgerError: If a ledger row cannot be removed.
        """
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")

        self.ledger.ensure_initialized()
        with self.db.connection() as conn:
            applied = self.ledger.list_applied(conn)

        entries = select_by_steps(applied, steps)
        if not entries:
            logger.info(f"No {self.kind.plural} to roll back")
            return RunResult()

        return self.rollbacker.run(entries, self._location(location))

    def reset(self, location: Path | str | None = None) -> RunResult:
        """Revert every applied unit, newest first, leaving an empty ledger."""
        self.ledger.ensure_initialized()
        with self.db.connection() as conn:
            applied = self.ledger.list_applied(conn)

        entries = select_all(applied)
        if not entries:
            logger.info(f"No {self.kind.plural} to reset")
            return RunResult()

        logger.info(f"Rolling back all {len(entries)} {self.kind.plural}")
        return self.rollbacker.run(entries, self._location(location))

    def fresh(self, location: Path | str | None = None) -> RunResult:
        """Drop every table except the ledger, clear the ledger, reapply all units.

        The drop and clear share one transaction; applying runs afterwards in
        the usual per-unit transactions. If the drop fails nothing is applied.
        """
        self.ledger.ensure_initialized()
        with self.db.transaction() as conn:
            dropped = self.db.drop_tables(conn, keep={self.ledger.name})
            cleared = self.ledger.clear(conn)

        logger.info(
            f"Dropped {len(dropped)} table(s) and cleared {cleared} "
            f"{self.kind.label} record(s)"
        )
        return self.apply_pending(location)

    def _location(self, location: Path | str | None) -> Path:
        return Path(location) if location is not None else self.location

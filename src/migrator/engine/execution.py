"""Apply pending units, one transaction per unit."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ..core.exceptions import (
    ApplyError,
    DatabaseError,
    LedgerError,
    UnitError,
    UnitLoadError,
)
from ..core.types import RunResult, UnitDescriptor, UnitKind
from ..units.base import UnitContext
from ..units.loader import LoadedUnit, dispose_unit

if TYPE_CHECKING:
    from ..app.protocols import DatabaseProtocol, UnitLoaderProtocol
    from ..store.ledger import LedgerStore


class ExecutionEngine:
    """Applies units in order and records each one in the ledger.

    For every unit a transaction is opened, the unit is loaded and applied,
    disposed, recorded under the run's batch number, and committed. The
    first failure rolls back that unit's transaction and stops the run, so
    a unit's effects and its ledger row are only ever committed together.
    """

    def __init__(
        self,
        db: "DatabaseProtocol",
        ledger: "LedgerStore",
        loader: "UnitLoaderProtocol",
        kind: UnitKind,
    ):
        """Initialize ExecutionEngine.

        Args:
            db: Database handle shared by ledger and units.
            ledger: Ledger of the unit kind.
            loader: Resolves descriptors to executable units.
            kind: Unit kind being applied.
        """
        self.db = db
        self.ledger = ledger
        self.loader = loader
        self.kind = kind

    def run(self, units: list[UnitDescriptor], batch: int) -> RunResult:
        """Apply ``units`` in the given order under one batch number.

        Args:
            units: Units sorted ascending by version.
            batch: Batch number to record.

        Returns:
            RunResult listing the applied units.

        Raises:
            UnitLoadError: If a unit cannot be loaded.
            ApplyError: If a unit's apply operation raises.
            LedgerError: If its ledger row cannot be written.
        """
        completed: list[UnitDescriptor] = []
        for unit in units:
            try:
                self.apply_one(unit, batch)
            except Exception as e:
                if isinstance(e, (UnitError, LedgerError)):
                    e.completed = list(completed)
                logger.error(
                    f"{self.kind.label.capitalize()} {unit.filename} failed after "
                    f"{len(completed)} applied: {e}"
                )
                raise
            completed.append(unit)

        logger.info(f"Applied {len(completed)} {self.kind.label}(s) in batch {batch}")
        return RunResult(units=completed, batch=batch)

    def apply_one(self, unit: UnitDescriptor, batch: int) -> None:
        """Apply a single unit inside its own transaction."""
        logger.info(f"Applying {self.kind.label}: {unit.filename}")

        try:
            with self.db.transaction() as conn:
                loaded = self._load(unit, UnitContext(conn, self.db.schema))
                try:
                    loaded.apply()
                except Exception as e:
                    raise ApplyError(unit, str(e) or type(e).__name__) from e
                finally:
                    dispose_unit(loaded)

                self.ledger.record(conn, unit.version, unit.name, batch)
        except DatabaseError as e:
            # Raised on commit, e.g. a deferred constraint the unit violated.
            raise ApplyError(unit, str(e)) from e

        logger.debug(f"{self.kind.label.capitalize()} {unit.filename} applied")

    def _load(self, unit: UnitDescriptor, ctx: UnitContext) -> LoadedUnit:
        try:
            return self.loader.load(unit, ctx)
        except UnitLoadError:
            raise
        except Exception as e:
            raise UnitLoadError(unit, str(e) or type(e).__name__) from e

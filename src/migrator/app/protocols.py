"""Protocol definitions for migrator's injectable dependencies.

The engines depend on these protocols rather than on concrete classes so
their control flow can be tested with in-memory fakes.

Example:
    class RecordingLoader:
        def load(self, unit, ctx):
            return LoadedUnit(unit=unit, apply=lambda: calls.append(unit.version))

    manager = UnitManager(db, MIGRATIONS, loader=RecordingLoader())
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy import Connection

    from ..core.types import UnitDescriptor
    from ..units.base import UnitContext
    from ..units.loader import LoadedUnit


@runtime_checkable
class DatabaseProtocol(Protocol):
    """Protocol for the storage handle passed through every operation."""

    url: str
    schema: str | None

    @property
    def dialect_name(self) -> str:
        """Dialect name of the connected engine."""
        ...

    def connect(self) -> None:
        """Create the engine."""
        ...

    def close(self) -> None:
        """Dispose of the engine."""
        ...

    def transaction(self) -> AbstractContextManager["Connection"]:
        """Context manager yielding a connection inside a transaction."""
        ...

    def connection(self) -> AbstractContextManager["Connection"]:
        """Context manager yielding a read-only connection."""
        ...

    def drop_tables(self, conn: "Connection", keep: set[str]) -> list[str]:
        """Drop every table except ``keep``."""
        ...


@runtime_checkable
class UnitLoaderProtocol(Protocol):
    """Protocol for resolving a unit descriptor to executable operations."""

    def load(self, unit: "UnitDescriptor", ctx: "UnitContext") -> "LoadedUnit":
        """Load a unit bound to the context of its transaction.

        Raises:
            UnitLoadError: If the unit cannot be resolved.
        """
        ...

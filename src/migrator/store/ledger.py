"""Ledger table operations: which unit versions were applied, in which batch."""

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from loguru import logger
from sqlalchemy import Column, Connection, Integer, delete, func, inspect, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.exceptions import DuplicateVersionError, LedgerError
from ..core.types import LedgerEntry, version_key
from .database import Database
from .models import ledger_table


class LedgerStore:
    """Repository for one ledger table.

    Every method except ``ensure_initialized`` runs on the caller's
    connection, so ledger writes commit or roll back together with the
    unit that caused them.
    """

    def __init__(self, db: Database, table: str):
        """Initialize with database and ledger table name.

        Args:
            db: Database instance to use for operations.
            table: Ledger table name.
        """
        self.db = db
        self.table = ledger_table(table, db.schema)

    @property
    def name(self) -> str:
        """Ledger table name."""
        return self.table.name

    def ensure_initialized(self) -> None:
        """Create the ledger table if it does not exist.

        Ledgers created before batches existed get a ``batch`` column
        defaulting to 1. Safe to call before every operation.
        """
        with self.db.transaction() as conn:
            inspector = inspect(conn)
            if not inspector.has_table(self.name, schema=self.db.schema):
                self.table.create(conn)
                logger.info(f"Created ledger table {self.name!r}")
                return

            columns = {c["name"] for c in inspector.get_columns(self.name, schema=self.db.schema)}
            if "batch" not in columns:
                op = Operations(MigrationContext.configure(conn))
                op.add_column(
                    self.name,
                    Column("batch", Integer, nullable=False, server_default="1"),
                    schema=self.db.schema,
                )
                logger.info(f"Added batch column to ledger table {self.name!r}")

    def exists(self, conn: Connection) -> bool:
        """Check whether the ledger table exists."""
        return inspect(conn).has_table(self.name, schema=self.db.schema)

    def list_applied(self, conn: Connection) -> list[LedgerEntry]:
        """Get all ledger entries.

        Returns:
            Entries in ascending version order.
        """
        rows = conn.execute(select(self.table)).mappings().all()
        entries = [
            LedgerEntry(
                id=row["id"],
                version=row["version"],
                name=row["name"],
                batch=row["batch"],
                executed_at=row["executed_at"],
            )
            for row in rows
        ]
        entries.sort(key=lambda entry: version_key(entry.version))
        return entries

    def current_batch(self, conn: Connection) -> int:
        """Get the highest batch number, or 0 for an empty ledger."""
        result = conn.execute(select(func.max(self.table.c.batch))).scalar()
        return result or 0

    def record(self, conn: Connection, version: str, name: str, batch: int) -> None:
        """Insert a ledger row.

        Raises:
            DuplicateVersionError: If the version is already recorded.
            LedgerError: If the insert fails for another reason.
        """
        try:
            conn.execute(
                insert(self.table).values(version=version, name=name, batch=batch)
            )
        except IntegrityError as e:
            raise DuplicateVersionError(version, self.name) from e
        except SQLAlchemyError as e:
            raise LedgerError(version, f"Failed to record version {version!r}: {e}") from e
        logger.debug(f"Recorded {version} ({name}) in batch {batch}")

    def erase(self, conn: Connection, version: str) -> None:
        """Delete the ledger row for ``version``; absent versions are ignored.

        Raises:
            LedgerError: If the delete fails.
        """
        try:
            result = conn.execute(delete(self.table).where(self.table.c.version == version))
        except SQLAlchemyError as e:
            raise LedgerError(version, f"Failed to erase version {version!r}: {e}") from e
        if result.rowcount == 0:
            logger.debug(f"Version {version} was not in {self.name!r}")

    def clear(self, conn: Connection) -> int:
        """Delete every ledger row.

        Returns:
            Number of rows removed.
        """
        return conn.execute(delete(self.table)).rowcount

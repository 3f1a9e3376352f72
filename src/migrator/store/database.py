"""SQLAlchemy database connection manager for migrator."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger
from sqlalchemy import Connection, Engine, MetaData, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ..core.exceptions import DatabaseError


class Database:
    """Owns one SQLAlchemy engine and hands out transactional connections.

    Every engine operation receives the same ``Database`` and opens its own
    connection per unit, so a unit's statements and its ledger row share one
    transaction.

    Example:
        with Database("sqlite:///app.db") as db:
            with db.transaction() as conn:
                conn.execute(text("CREATE TABLE t (id INTEGER)"))
    """

    def __init__(self, url: str, schema: str | None = None):
        """Initialize database with URL.

        Args:
            url: SQLAlchemy database URL.
            schema: Target schema, or None for the dialect default.
        """
        self.url = url
        self.schema = schema
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine:
        """Connected engine."""
        if self._engine is None:
            raise DatabaseError("Database not connected")
        return self._engine

    @property
    def dialect_name(self) -> str:
        """Dialect name of the connected engine (sqlite, postgresql, ...)."""
        return self.engine.dialect.name

    def connect(self) -> None:
        """Create the engine and verify the database is reachable."""
        if self._engine is not None:
            return

        try:
            url = make_url(self.url)
            kwargs = {}
            if url.get_backend_name() == "sqlite":
                if url.database and url.database != ":memory:":
                    Path(url.database).parent.mkdir(parents=True, exist_ok=True)
                else:
                    # One shared connection, otherwise each checkout is a new database
                    kwargs = {
                        "poolclass": StaticPool,
                        "connect_args": {"check_same_thread": False},
                    }

            engine = create_engine(url, **kwargs)
            if engine.dialect.name == "sqlite":
                _enable_sqlite_transactions(engine)

            with engine.connect():
                pass
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

        self._engine = engine
        logger.debug(f"Connected to {url.render_as_string(hide_password=True)}")

    def close(self) -> None:
        """Dispose of the engine and its pool."""
        if self._engine is not None:
            try:
                self._engine.dispose()
            except SQLAlchemyError as e:
                raise DatabaseError(f"Failed to close database: {e}") from e
            finally:
                self._engine = None

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Context manager for one database transaction.

        Commits when the block exits normally and rolls back when it raises.
        Errors from the block propagate unchanged; driver errors at the
        transaction boundary become DatabaseError.

        Yields:
            A connection inside an open transaction.
        """
        engine = self.engine
        try:
            with engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise DatabaseError(f"Transaction failed: {e}") from e

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Context manager for a read-only connection (rolled back on exit)."""
        try:
            with self.engine.connect() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def drop_tables(self, conn: Connection, keep: set[str]) -> list[str]:
        """Drop every table in the target schema except ``keep``.

        Tables are dropped in foreign-key dependency order.

        Args:
            conn: Connection inside the caller's transaction.
            keep: Table names to leave in place.

        Returns:
            Names of the dropped tables.
        """
        metadata = MetaData(schema=self.schema)
        metadata.reflect(bind=conn)
        for table in list(metadata.tables.values()):
            if table.name in keep:
                metadata.remove(table)

        dropped = [table.name for table in reversed(metadata.sorted_tables)]
        metadata.drop_all(bind=conn)
        logger.debug(f"Dropped {len(dropped)} table(s): {', '.join(dropped) or '-'}")
        return dropped

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _enable_sqlite_transactions(engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so DDL is rolled back with the transaction."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

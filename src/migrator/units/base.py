"""Base classes and execution context for unit files.

A migration file usually looks like:

    from migrator import BaseMigration
    import sqlalchemy as sa


    class CreateUsers(BaseMigration):
        def up(self):
            self.op.create_table(
                "users",
                sa.Column("id", sa.Integer, primary_key=True),
                sa.Column("email", sa.String(255), nullable=False),
            )

        def down(self):
            self.op.drop_table("users")

Module-level ``up(ctx)`` / ``down(ctx)`` functions work as well.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from alembic.operations import Operations
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Connection, MetaData, Table, func, insert, literal, select, table, text
from sqlalchemy.engine import CursorResult


class UnitContext:
    """What a unit gets to work with: the connection of its transaction.

    Attributes:
        connection: Connection inside the unit's transaction.
        schema: Target schema, or None for the dialect default.
    """

    def __init__(self, connection: Connection, schema: str | None = None):
        self.connection = connection
        self.schema = schema
        self._op: Operations | None = None

    @property
    def op(self) -> Operations:
        """Alembic operations bound to the unit's connection."""
        if self._op is None:
            self._op = Operations(MigrationContext.configure(self.connection))
        return self._op

    @property
    def dialect_name(self) -> str:
        return self.connection.dialect.name

    def execute(self, sql: Any, params: Mapping[str, Any] | None = None) -> CursorResult:
        """Execute a statement; plain strings are wrapped in ``text()``."""
        if isinstance(sql, str):
            sql = text(sql)
        return self.connection.execute(sql, dict(params or {}))


class BaseUnit:
    """Common base for class-based units.

    The loader instantiates the subclass with a UnitContext. Subclasses
    define the apply operation of their kind and optionally ``down`` and
    ``close``.
    """

    def __init__(self, ctx: UnitContext):
        self.ctx = ctx

    @property
    def connection(self) -> Connection:
        return self.ctx.connection

    @property
    def op(self) -> Operations:
        return self.ctx.op

    @property
    def schema(self) -> str | None:
        return self.ctx.schema

    def execute(self, sql: Any, params: Mapping[str, Any] | None = None) -> CursorResult:
        """Execute a statement on the unit's connection."""
        return self.ctx.execute(sql, params)


class BaseMigration(BaseUnit):
    """Base class for migrations: define ``up()`` and optionally ``down()``."""


class BaseSeeder(BaseUnit):
    """Base class for seeders: define ``run()`` and optionally ``down()``.

    Adds small helpers for data seeding.
    """

    def count(self, table_name: str) -> int:
        """Number of rows in ``table_name``."""
        stmt = select(func.count()).select_from(table(table_name, schema=self.schema))
        return self.connection.execute(stmt).scalar_one()

    def exists(
        self,
        table_name: str,
        condition: str,
        params: Mapping[str, Any] | None = None,
    ) -> bool:
        """Check whether a row matching a SQL ``condition`` exists.

        Example:
            self.exists("users", "email = :email", {"email": "a@example.com"})
        """
        stmt = (
            select(literal(1))
            .select_from(table(table_name, schema=self.schema))
            .where(text(condition))
            .limit(1)
        )
        return self.connection.execute(stmt, dict(params or {})).first() is not None

    def insert_or_ignore(self, table_name: str, rows: Iterable[Mapping[str, Any]]) -> None:
        """Insert rows, skipping those that violate a unique constraint.

        Raises:
            NotImplementedError: For dialects without an ignore-conflict insert.
        """
        rows = [dict(row) for row in rows]
        if not rows:
            return

        target = Table(table_name, MetaData(schema=self.schema), autoload_with=self.connection)
        dialect = self.ctx.dialect_name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as pg_insert

            stmt = pg_insert(target).on_conflict_do_nothing()
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as sqlite_insert

            stmt = sqlite_insert(target).on_conflict_do_nothing()
        elif dialect in ("mysql", "mariadb"):
            stmt = insert(target).prefix_with("IGNORE")
        else:
            raise NotImplementedError(f"insert_or_ignore is not supported on {dialect}")

        self.connection.execute(stmt, rows)

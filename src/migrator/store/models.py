"""SQLAlchemy table definitions for the ledger.

The ledger table name differs per unit kind, so tables are built by a
factory on a private MetaData instead of declared as ORM models.
"""

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    func,
)


def ledger_table(name: str, schema: str | None = None) -> Table:
    """Build the ledger table definition.

    Args:
        name: Ledger table name (e.g. ``migrations``).
        schema: Target schema, or None for the dialect default.

    Returns:
        Table bound to its own MetaData.
    """
    return Table(
        name,
        MetaData(schema=schema),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("version", String(255), nullable=False, unique=True),
        Column("name", String(255), nullable=False),
        Column("batch", Integer, nullable=False),
        Column("executed_at", DateTime, server_default=func.current_timestamp()),
    )

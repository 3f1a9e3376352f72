"""Database access and ledger storage for migrator."""

from .database import Database
from .ledger import LedgerStore
from .models import ledger_table

__all__ = [
    "Database",
    "LedgerStore",
    "ledger_table",
]

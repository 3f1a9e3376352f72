"""migrator - versioned migrations and seeders with a batch ledger."""

from .core.config import Config
from .core.types import MIGRATIONS, SEEDERS, UnitKind
from .engine.lifecycle import UnitManager
from .store.database import Database
from .units.base import BaseMigration, BaseSeeder, UnitContext

__version__ = "1.0.0"

__all__ = [
    "BaseMigration",
    "BaseSeeder",
    "Config",
    "Database",
    "MIGRATIONS",
    "SEEDERS",
    "UnitContext",
    "UnitKind",
    "UnitManager",
]

"""Versioned unit execution: apply, rollback and lifecycle operations.

Example:
    from migrator.engine import UnitManager

    manager = UnitManager(db, MIGRATIONS)
    manager.apply_pending()
    manager.rollback(steps=1)
"""

from .execution import ExecutionEngine
from .lifecycle import UnitManager
from .rollback import RollbackEngine, select_all, select_by_steps

__all__ = [
    "ExecutionEngine",
    "RollbackEngine",
    "UnitManager",
    "select_all",
    "select_by_steps",
]

"""Test fakes for migrator."""

from .units import FakeUnit, FakeUnitLoader, table_names, write_units

__all__ = [
    "FakeUnit",
    "FakeUnitLoader",
    "table_names",
    "write_units",
]

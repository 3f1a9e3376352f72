"""Unit files: discovery, loading, base classes and scaffolding."""

from .base import BaseMigration, BaseSeeder, BaseUnit, UnitContext
from .catalog import UnitCatalog, name_from_filename, sort_units, version_from_filename
from .loader import FileUnitLoader, LoadedUnit
from .scaffold import clean_name, create_unit

__all__ = [
    "BaseUnit",
    "BaseMigration",
    "BaseSeeder",
    "UnitContext",
    "UnitCatalog",
    "version_from_filename",
    "name_from_filename",
    "sort_units",
    "FileUnitLoader",
    "LoadedUnit",
    "clean_name",
    "create_unit",
]

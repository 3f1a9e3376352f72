"""Application-level protocols for migrator."""

from .protocols import DatabaseProtocol, UnitLoaderProtocol

__all__ = [
    "DatabaseProtocol",
    "UnitLoaderProtocol",
]

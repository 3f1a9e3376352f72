"""Core configuration, errors and types for migrator."""

from .config import Config, write_default_config
from .exceptions import (
    ApplyError,
    ConfigurationError,
    DatabaseError,
    DiscoveryError,
    DuplicateVersionError,
    LedgerError,
    MigratorError,
    RevertError,
    UnitError,
    UnitLoadError,
)
from .types import (
    MIGRATIONS,
    SEEDERS,
    LedgerEntry,
    RunResult,
    StatusReport,
    UnitDescriptor,
    UnitKind,
    version_key,
)

__all__ = [
    "Config",
    "write_default_config",
    "MigratorError",
    "DatabaseError",
    "ConfigurationError",
    "DiscoveryError",
    "UnitError",
    "UnitLoadError",
    "ApplyError",
    "RevertError",
    "LedgerError",
    "DuplicateVersionError",
    "UnitKind",
    "MIGRATIONS",
    "SEEDERS",
    "UnitDescriptor",
    "LedgerEntry",
    "StatusReport",
    "RunResult",
    "version_key",
]

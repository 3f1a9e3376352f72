"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from loguru import logger

from migrator.core.types import MIGRATIONS
from migrator.engine.lifecycle import UnitManager
from migrator.store.database import Database
from migrator.store.ledger import LedgerStore
from tests.fakes import FakeUnitLoader


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def db_url(test_db_path: Path) -> str:
    """SQLAlchemy URL of the temporary database."""
    return f"sqlite:///{test_db_path}"


@pytest.fixture
def db(db_url: str) -> Database:
    """Provide a connected database instance."""
    database = Database(db_url)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def ledger(db: Database) -> LedgerStore:
    """Provide an initialized migrations ledger."""
    store = LedgerStore(db, MIGRATIONS.table)
    store.ensure_initialized()
    return store


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Provide an empty migrations directory."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    return directory


@pytest.fixture
def seeders_dir(tmp_path: Path) -> Path:
    """Provide an empty seeders directory."""
    directory = tmp_path / "seeders"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_loader() -> FakeUnitLoader:
    """Provide a loader that records calls instead of importing files."""
    return FakeUnitLoader()


@pytest.fixture
def manager(db: Database, migrations_dir: Path, fake_loader: FakeUnitLoader) -> UnitManager:
    """Migration manager wired to the fake loader."""
    return UnitManager(db, MIGRATIONS, loader=fake_loader, location=migrations_dir)


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(str(message)), level="DEBUG")
    yield messages
    logger.remove(handler_id)

"""Pytest configuration and fixtures for integration tests."""

import shutil
from pathlib import Path

import pytest

from migrator.core.types import MIGRATIONS, SEEDERS
from migrator.engine.lifecycle import UnitManager
from migrator.store.database import Database


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Copy of the sample project (migrations and seeders) in a temp directory."""
    source = Path(__file__).parent.parent / "fixtures" / "sample_project"
    target = tmp_path / "project"
    shutil.copytree(source, target)
    return target


@pytest.fixture
def migrations(db: Database, sample_project: Path) -> UnitManager:
    """Migration manager loading the sample project's files."""
    return UnitManager(db, MIGRATIONS, location=sample_project / "migrations")


@pytest.fixture
def seeders(db: Database, sample_project: Path) -> UnitManager:
    """Seeder manager loading the sample project's files."""
    return UnitManager(db, SEEDERS, location=sample_project / "seeders")

"""Tests for unit discovery."""

from pathlib import Path

import pytest

from migrator.core.exceptions import DiscoveryError
from migrator.core.types import MIGRATIONS
from migrator.units.catalog import (
    UnitCatalog,
    name_from_filename,
    version_from_filename,
)
from tests.fakes import write_units


@pytest.fixture
def catalog() -> UnitCatalog:
    return UnitCatalog(MIGRATIONS)


class TestFilenames:
    """Tests for version and name derivation."""

    @pytest.mark.parametrize(
        "filename, version, name",
        [
            ("20240101120000_create_users.py", "20240101120000", "create_users"),
            ("1_a.py", "1", "a"),
            ("v2_add_index.py", "v2", "v2_add_index"),
            ("initial.py", "initial.py", "initial"),
        ],
    )
    def test_derivation(self, filename, version, name):
        assert version_from_filename(filename) == version
        assert name_from_filename(filename) == name


class TestDiscover:
    """Tests for UnitCatalog.discover."""

    def test_sorted_regardless_of_listing(self, catalog: UnitCatalog, migrations_dir: Path):
        write_units(migrations_dir, "10_c.py", "2_b.py", "1_a.py")

        units = catalog.discover(migrations_dir)

        assert [u.filename for u in units] == ["1_a.py", "2_b.py", "10_c.py"]

    def test_skips_non_unit_files(self, catalog: UnitCatalog, migrations_dir: Path):
        write_units(
            migrations_dir,
            "1_a.py",
            "__init__.py",
            "_helpers.py",
            ".2_hidden.py",
            "README.md",
            "3_c.pyc",
        )
        (migrations_dir / "4_dir.py").mkdir()

        assert [u.filename for u in catalog.discover(migrations_dir)] == ["1_a.py"]

    def test_same_version_ordered_by_filename(
        self, catalog: UnitCatalog, migrations_dir: Path
    ):
        write_units(migrations_dir, "1_b.py", "1_a.py")

        assert [u.filename for u in catalog.discover(migrations_dir)] == ["1_a.py", "1_b.py"]

    def test_missing_directory(self, catalog: UnitCatalog, tmp_path: Path):
        with pytest.raises(DiscoveryError):
            catalog.discover(tmp_path / "absent")

    def test_empty_directory(self, catalog: UnitCatalog, migrations_dir: Path):
        assert catalog.discover(migrations_dir) == []


class TestPending:
    """Tests for pending, find and resolve."""

    def test_pending_excludes_applied(self, catalog: UnitCatalog, migrations_dir: Path):
        write_units(migrations_dir, "1_a.py", "2_b.py", "3_c.py")

        pending = catalog.pending(migrations_dir, ["2"])

        assert [u.version for u in pending] == ["1", "3"]

    def test_applied_versions_without_files_are_ignored(
        self, catalog: UnitCatalog, migrations_dir: Path
    ):
        write_units(migrations_dir, "1_a.py")

        assert [u.version for u in catalog.pending(migrations_dir, ["99"])] == ["1"]

    def test_find(self, catalog: UnitCatalog, migrations_dir: Path):
        write_units(migrations_dir, "1_a.py", "2_b.py")

        assert catalog.find(migrations_dir, "2").filename == "2_b.py"
        assert catalog.find(migrations_dir, "3") is None

    def test_resolve(self, catalog: UnitCatalog, migrations_dir: Path):
        write_units(migrations_dir, "5_seed.py", "notes.txt")

        unit = catalog.resolve(migrations_dir, "5_seed.py")

        assert unit.version == "5"
        assert unit.path == migrations_dir / "5_seed.py"
        with pytest.raises(DiscoveryError, match="not found"):
            catalog.resolve(migrations_dir, "6_missing.py")
        with pytest.raises(DiscoveryError, match="Not a migration file"):
            catalog.resolve(migrations_dir, "notes.txt")

"""Tests for core types and version ordering."""

from pathlib import Path

from migrator.core.types import (
    MIGRATIONS,
    SEEDERS,
    RunResult,
    StatusReport,
    UnitDescriptor,
    version_key,
)


def _unit(version: str, name: str = "x") -> UnitDescriptor:
    return UnitDescriptor(path=Path(f"{version}_{name}.py"), version=version, name=name)


class TestVersionKey:
    """Tests for version_key ordering."""

    def test_mixed_width_numbers_sort_by_value(self):
        """Shorter numeric tokens should precede longer ones."""
        assert sorted(["2", "1", "10"], key=version_key) == ["1", "2", "10"]

    def test_timestamps_sort_like_strings(self):
        """Equal-width tokens should order exactly as plain strings."""
        versions = ["20240102000000", "20231231235959", "20240101120000"]
        assert sorted(versions, key=version_key) == sorted(versions)

    def test_leading_zeros_break_ties_by_string(self):
        """Numerically equal tokens should still have a total order."""
        assert sorted(["1", "01"], key=version_key) == ["01", "1"]

    def test_text_tokens_sort_lexicographically(self):
        """Non-numeric tokens should compare as text."""
        assert sorted(["beta", "alpha"], key=version_key) == ["alpha", "beta"]


class TestUnitKinds:
    """Tests for the stock unit kinds."""

    def test_migrations_kind(self):
        assert MIGRATIONS.table == "migrations"
        assert MIGRATIONS.apply_name == "up"
        assert MIGRATIONS.revert_name == "down"

    def test_seeders_kind(self):
        assert SEEDERS.table == "seeders"
        assert SEEDERS.apply_name == "run"
        assert SEEDERS.plural == "seeders"


class TestResults:
    """Tests for RunResult and StatusReport."""

    def test_empty_run_result(self):
        result = RunResult()
        assert result.count == 0
        assert result.versions == []
        assert result.batch is None

    def test_run_result_versions_keep_order(self):
        result = RunResult(units=[_unit("2"), _unit("1")], batch=3)
        assert result.versions == ["2", "1"]
        assert result.count == 2

    def test_status_up_to_date(self):
        assert StatusReport().is_up_to_date
        assert not StatusReport(pending=[_unit("1")]).is_up_to_date

    def test_descriptor_filename(self):
        unit = _unit("1", "create_users")
        assert unit.filename == "1_create_users.py"
        assert str(unit) == "1_create_users.py"

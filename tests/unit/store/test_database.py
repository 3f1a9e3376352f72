"""Tests for the Database connection manager."""

from pathlib import Path

import pytest
from sqlalchemy import text

from migrator.core.exceptions import DatabaseError
from migrator.store.database import Database
from tests.fakes import table_names


class TestConnection:
    """Tests for connect/close."""

    def test_connect_creates_file_and_parent(self, tmp_path: Path):
        path = tmp_path / "nested" / "app.db"

        with Database(f"sqlite:///{path}") as db:
            assert db.dialect_name == "sqlite"

        assert path.exists()

    def test_connect_is_idempotent(self, db: Database):
        engine = db.engine

        db.connect()

        assert db.engine is engine

    def test_engine_requires_connect(self):
        db = Database("sqlite://")

        with pytest.raises(DatabaseError, match="not connected"):
            db.engine

    def test_close_releases_engine(self, db_url: str):
        db = Database(db_url)
        db.connect()

        db.close()

        with pytest.raises(DatabaseError):
            db.engine

    def test_unreachable_database(self, tmp_path: Path):
        # A directory cannot be opened as a SQLite file
        directory = tmp_path / "dir.db"
        directory.mkdir()

        with pytest.raises(DatabaseError, match="Failed to connect"):
            Database(f"sqlite:///{directory}").connect()

    def test_memory_database_is_shared(self):
        """Tables created in one transaction are visible to the next."""
        with Database("sqlite://") as db:
            with db.transaction() as conn:
                conn.execute(text("CREATE TABLE t (id INTEGER)"))

            assert "t" in table_names(db)


class TestTransaction:
    """Tests for transactional behaviour on SQLite."""

    def test_commit(self, db: Database):
        with db.transaction() as conn:
            conn.execute(text("CREATE TABLE t (id INTEGER)"))
            conn.execute(text("INSERT INTO t (id) VALUES (1)"))

        with db.connection() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM t")).scalar() == 1

    def test_ddl_rolls_back(self, db: Database):
        """DDL must be undone along with the rest of a failed transaction."""
        with pytest.raises(RuntimeError):
            with db.transaction() as conn:
                conn.execute(text("CREATE TABLE t (id INTEGER)"))
                raise RuntimeError("abort")

        assert "t" not in table_names(db)

    def test_block_errors_propagate_unchanged(self, db: Database):
        with pytest.raises(KeyError):
            with db.transaction():
                raise KeyError("x")

    def test_driver_errors_become_database_error(self, db: Database):
        with pytest.raises(DatabaseError, match="Transaction failed"):
            with db.transaction() as conn:
                conn.execute(text("SELECT * FROM no_such_table"))

    def test_foreign_keys_enforced(self, db: Database):
        with db.transaction() as conn:
            conn.execute(text("CREATE TABLE parent (id INTEGER PRIMARY KEY)"))
            conn.execute(
                text("CREATE TABLE child (id INTEGER, parent_id INTEGER REFERENCES parent(id))")
            )

        with pytest.raises(DatabaseError):
            with db.transaction() as conn:
                conn.execute(text("INSERT INTO child (id, parent_id) VALUES (1, 42)"))


class TestDropTables:
    """Tests for Database.drop_tables."""

    def test_drops_all_but_kept(self, db: Database):
        with db.transaction() as conn:
            for name in ("keep_me", "a", "b"):
                conn.execute(text(f"CREATE TABLE {name} (id INTEGER)"))

        with db.transaction() as conn:
            dropped = db.drop_tables(conn, keep={"keep_me"})

        assert sorted(dropped) == ["a", "b"]
        assert table_names(db) == {"keep_me"}

    def test_dependency_order(self, db: Database):
        with db.transaction() as conn:
            conn.execute(text("CREATE TABLE parent (id INTEGER PRIMARY KEY)"))
            conn.execute(
                text("CREATE TABLE child (id INTEGER, parent_id INTEGER REFERENCES parent(id))")
            )

        with db.transaction() as conn:
            dropped = db.drop_tables(conn, keep=set())

        assert dropped == ["child", "parent"]
        assert table_names(db) == set()

    def test_empty_schema(self, db: Database):
        with db.transaction() as conn:
            assert db.drop_tables(conn, keep=set()) == []

"""Tests for database connection and management."""

import sqlite3
from pathlib import Path

import pytest

from sqlmigrate.core.exceptions import BackendError, DatabaseError
from sqlmigrate.store.database import Database


class TestDatabaseConnection:
    """Tests for database connection lifecycle."""

    def test_connect_creates_database_file(self, test_db_path: Path):
        """Database file should be created on connect."""
        db = Database(test_db_path)
        db.connect()

        assert test_db_path.exists()
        db.close()

    def test_connect_creates_parent_directories(self, tmp_path: Path):
        """Connect should create parent directories if needed."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        db = Database(db_path)
        db.connect()

        assert db_path.exists()
        db.close()

    def test_memory_database(self):
        """':memory:' should connect without touching the filesystem."""
        with Database(":memory:") as db:
            assert db.execute("SELECT 1").fetchone()[0] == 1

    def test_close_without_connect(self, test_db_path: Path):
        """Close should not raise if not connected."""
        db = Database(test_db_path)
        db.close()  # Should not raise

    def test_double_connect(self, test_db_path: Path):
        """Connecting twice should work without error."""
        db = Database(test_db_path)
        db.connect()
        db.connect()  # Should not raise
        db.close()

    def test_close_clears_connection(self, test_db_path: Path):
        """Close should clear the connection."""
        db = Database(test_db_path)
        db.connect()
        db.close()

        with pytest.raises(DatabaseError, match="not connected"):
            db.execute("SELECT 1")

    def test_context_manager_closes(self, test_db_path: Path):
        """Leaving the with-block should close the connection."""
        with Database(test_db_path) as db:
            db.execute("SELECT 1")

        with pytest.raises(DatabaseError):
            db.execute("SELECT 1")


class TestDatabaseExecute:
    """Tests for query execution."""

    def test_execute_error_is_database_error(self, db: Database):
        """SQL errors should surface as DatabaseError."""
        with pytest.raises(DatabaseError, match="Query execution failed") as exc_info:
            db.execute("SELECT * FROM missing_table")

        assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)

    def test_database_error_is_backend_error(self):
        """DatabaseError should be classified as a backend failure."""
        assert issubclass(DatabaseError, BackendError)

    def test_executescript_runs_all_statements(self, db: Database):
        """executescript should run every statement."""
        db.executescript("CREATE TABLE a(x); CREATE TABLE b(y);")

        tables = {
            row[0]
            for row in db.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"a", "b"} <= tables


class TestDatabaseTransaction:
    """Tests for explicit transactions."""

    def test_commit_on_success(self, db: Database):
        """Statements should persist when the block succeeds."""
        db.execute("CREATE TABLE t(x INT)")

        with db.transaction() as cursor:
            cursor.execute("INSERT INTO t VALUES (1)")

        assert db.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 1

    def test_rollback_on_error(self, db: Database):
        """Statements should be rolled back when the block raises."""
        db.execute("CREATE TABLE t(x INT)")

        with pytest.raises(DatabaseError, match="Transaction failed"):
            with db.transaction() as cursor:
                cursor.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("boom")

        assert db.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 0

    def test_ddl_is_rolled_back(self, db: Database):
        """CREATE TABLE inside a failed transaction should not persist."""
        with pytest.raises(DatabaseError):
            with db.transaction() as cursor:
                cursor.execute("CREATE TABLE t(x INT)")
                cursor.execute("INSERT INTO nope VALUES (1)")

        tables = [
            row[0]
            for row in db.execute("SELECT name FROM sqlite_master WHERE name='t'")
        ]
        assert tables == []

    def test_transaction_requires_connection(self, test_db_path: Path):
        """transaction() on a closed database should raise."""
        db = Database(test_db_path)

        with pytest.raises(DatabaseError, match="not connected"):
            with db.transaction():
                pass

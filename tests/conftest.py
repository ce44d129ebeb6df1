"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from sqlmigrate.store.backend import SQLiteBackend
from sqlmigrate.store.database import Database


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path for tests."""
    return tmp_path / "test.db"


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Provide an empty migrations directory."""
    path = tmp_path / "migrations"
    path.mkdir()
    return path


@pytest.fixture
def write_migration(migrations_dir: Path) -> Callable[[str, str | bytes], Path]:
    """Provide a helper that writes a migration file into migrations_dir."""

    def _write(name: str, content: str | bytes) -> Path:
        path = migrations_dir / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def db(test_db_path: Path) -> Database:
    """Provide a connected database instance."""
    database = Database(test_db_path)
    database.connect()
    yield database
    database.close()


@pytest.fixture
def sqlite_backend(db: Database) -> SQLiteBackend:
    """Provide a SQLiteBackend on the test database."""
    return SQLiteBackend(db)

"""Storage backends for sqlmigrate.

This package provides concrete implementations of the migration backend
protocol:
- SQLiteBackend: a local SQLite file through the ``sqlite3`` module
- SQLAlchemyBackend: any database reachable through a SQLAlchemy URL

Example:
    from sqlmigrate.store import Database, SQLiteBackend

    with Database(Path("app.db")) as db:
        backend = SQLiteBackend(db)
"""

from .backend import SQLiteBackend
from .database import Database
from .sqlalchemy_backend import SQLAlchemyBackend
from .statements import split_sql_statements

__all__ = [
    "Database",
    "SQLiteBackend",
    "SQLAlchemyBackend",
    "split_sql_statements",
]

"""SQL migration discovery and reconciliation.

Example:
    from sqlmigrate.migrations import MigrationEngine
    from sqlmigrate.store import Database, SQLiteBackend

    db = Database(Path("app.db"))
    db.connect()
    result = MigrationEngine(SQLiteBackend(db), "migrations").reconcile()
"""

from .catalog import list_migrations
from .engine import (
    BOOTSTRAP_MIGRATIONS_SQL,
    CONTROL_TABLE,
    MigrationEngine,
    run_migrations,
)

__all__ = [
    "BOOTSTRAP_MIGRATIONS_SQL",
    "CONTROL_TABLE",
    "MigrationEngine",
    "list_migrations",
    "run_migrations",
]

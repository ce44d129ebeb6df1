"""SQLite migration backend."""

from __future__ import annotations

import sqlite3
from typing import Optional

from loguru import logger

from ..core.exceptions import DatabaseError
from ..core.types import AppliedMigration
from ..migrations.engine import CONTROL_TABLE
from .database import Database
from .statements import find_transaction_control, split_sql_statements


class SQLiteBackend:
    """Migration backend for a SQLite database file.

    Implements ``MigrationBackendProtocol`` on top of ``Database``. Each
    migration runs in its own transaction together with its control-table
    insert.

    Example:
        with Database(Path("app.db")) as db:
            MigrationEngine(SQLiteBackend(db), "migrations").reconcile()
    """

    def __init__(self, db: Database, executed_by: str = "system"):
        """Initialize backend.

        Args:
            db: Connected database.
            executed_by: Default identity recorded with applied migrations.
        """
        self._db = db
        self._executed_by = executed_by

    def ensure_control_table(self, bootstrap_sql: str) -> None:
        """Create the control table if it does not exist."""
        self._db.executescript(bootstrap_sql)

    def fetch_applied_migrations(self) -> list[AppliedMigration]:
        """Return applied migrations ordered by name."""
        cursor = self._db.execute(
            f"SELECT name, checksum, executed_at FROM {CONTROL_TABLE} ORDER BY name ASC"
        )
        return [
            AppliedMigration(
                name=row["name"],
                checksum=row["checksum"],
                executed_at=str(row["executed_at"]) if row["executed_at"] else None,
            )
            for row in cursor.fetchall()
        ]

    def _record(
        self,
        cursor: sqlite3.Cursor,
        name: str,
        checksum: str,
        description: Optional[str],
        executed_by: Optional[str],
    ) -> None:
        cursor.execute(
            f"INSERT INTO {CONTROL_TABLE} (name, checksum, description, executed_by) "
            "VALUES (?, ?, ?, ?)",
            (name, checksum, description, executed_by),
        )

    def apply_migration(
        self,
        name: str,
        sql: str,
        checksum: str,
        description: Optional[str] = None,
        executed_by: Optional[str] = None,
    ) -> None:
        """Run a migration script and record it in one transaction.

        Raises:
            DatabaseError: If any statement or the insert fails, or the
                script issues its own BEGIN/COMMIT/ROLLBACK; nothing from
                this migration is committed in that case.
        """
        statements = split_sql_statements(sql)
        logger.debug(f"{name}: {len(statements)} statement(s)")
        if offending := find_transaction_control(statements):
            raise DatabaseError(
                f"Migration {name} must not control transactions: {offending!r}"
            )

        with self._db.transaction() as cursor:
            for statement in statements:
                cursor.execute(statement)
            if not cursor.connection.in_transaction:
                raise DatabaseError(f"Migration {name} ended its own transaction")
            self._record(
                cursor,
                name,
                checksum,
                description,
                executed_by or self._executed_by,
            )

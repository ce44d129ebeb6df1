"""SQLite database connection manager for sqlmigrate."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger

from ..core.exceptions import DatabaseError


class Database:
    """SQLite database connection manager.

    The connection runs in autocommit mode and transactions are opened
    explicitly with ``BEGIN``, so DDL statements inside ``transaction()``
    roll back along with everything else.
    """

    def __init__(self, path: Path | str):
        """Initialize database with path.

        Args:
            path: Path to the SQLite database file, or ``":memory:"``.
        """
        self.path = Path(path)
        self._connection: sqlite3.Connection | None = None

    @property
    def is_memory(self) -> bool:
        return str(self.path) == ":memory:"

    def connect(self) -> None:
        """Open the database connection."""
        if self._connection:
            return
        try:
            if not self.is_memory:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(str(self.path), isolation_level=None)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
            logger.debug(f"Connected to {self.path}")
        except (OSError, sqlite3.Error) as e:
            raise DatabaseError(f"Failed to connect to database: {e}") from e

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            try:
                self._connection.close()
            except sqlite3.Error as e:
                raise DatabaseError(f"Failed to close database: {e}") from e
            finally:
                self._connection = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _require_connection(self) -> sqlite3.Connection:
        if not self._connection:
            raise DatabaseError("Database not connected")
        return self._connection

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Context manager for database transactions.

        Yields:
            A cursor for executing SQL statements.

        Raises:
            DatabaseError: If connection is not available or transaction fails.
        """
        connection = self._require_connection()

        cursor = connection.cursor()
        try:
            cursor.execute("BEGIN")
            yield cursor
            cursor.execute("COMMIT")
        except Exception as e:
            if connection.in_transaction:
                connection.execute("ROLLBACK")
            if isinstance(e, DatabaseError):
                raise
            raise DatabaseError(f"Transaction failed: {e}") from e
        finally:
            cursor.close()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a SQL query.

        Args:
            sql: SQL statement to execute.
            params: Parameters for the SQL statement.

        Returns:
            A cursor with the query results.

        Raises:
            DatabaseError: If connection is not available or query fails.
        """
        connection = self._require_connection()

        try:
            return connection.execute(sql, params)
        except sqlite3.Error as e:
            raise DatabaseError(f"Query execution failed: {e}") from e

    def executescript(self, sql: str) -> None:
        """Execute multiple SQL statements outside of any transaction.

        Args:
            sql: SQL script with multiple statements.

        Raises:
            DatabaseError: If connection is not available or script fails.
        """
        connection = self._require_connection()

        try:
            connection.executescript(sql)
        except sqlite3.Error as e:
            raise DatabaseError(f"Script execution failed: {e}") from e

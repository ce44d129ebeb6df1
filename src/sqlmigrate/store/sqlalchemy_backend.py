"""SQLAlchemy migration backend.

Runs migrations against any database SQLAlchemy can connect to. The
script of a migration and its control-table row are written inside a
single ``engine.begin()`` block.

Example:
    backend = SQLAlchemyBackend("postgresql+psycopg2://localhost/app")
    run_migrations(backend, "migrations")
"""

from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from ..core.exceptions import BackendError
from ..core.types import AppliedMigration
from ..migrations.engine import CONTROL_TABLE
from .statements import find_transaction_control, split_sql_statements


def _sqlite_on_connect(dbapi_connection, connection_record) -> None:
    # Stop pysqlite from issuing its own BEGIN (and skipping it for DDL)
    dbapi_connection.isolation_level = None


def _sqlite_on_begin(conn: Connection) -> None:
    conn.exec_driver_sql("BEGIN")


def _enable_sqlite_transactional_ddl(engine: Engine) -> None:
    """Make pysqlite transactions cover DDL statements.

    Must run before the engine opens its first connection.
    """
    if not event.contains(engine, "connect", _sqlite_on_connect):
        event.listen(engine, "connect", _sqlite_on_connect)
    if not event.contains(engine, "begin", _sqlite_on_begin):
        event.listen(engine, "begin", _sqlite_on_begin)


class SQLAlchemyBackend:
    """Migration backend built on SQLAlchemy Core.

    Implements ``MigrationBackendProtocol``. Every failure is raised as
    ``BackendError`` with the SQLAlchemy exception chained.
    """

    def __init__(self, url_or_engine: str | Engine, executed_by: str = "system"):
        """Initialize backend.

        Args:
            url_or_engine: SQLAlchemy database URL or an existing engine.
            executed_by: Default identity recorded with applied migrations.
        """
        if isinstance(url_or_engine, Engine):
            self._engine = url_or_engine
            self._owns_engine = False
        else:
            try:
                self._engine = create_engine(url_or_engine)
            except (SQLAlchemyError, ImportError) as e:
                raise BackendError(f"Failed to create engine: {e}") from e
            self._owns_engine = True

        self._executed_by = executed_by
        if self.dialect == "sqlite":
            _enable_sqlite_transactional_ddl(self._engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    def close(self) -> None:
        """Dispose the engine if this backend created it."""
        if self._owns_engine:
            self._engine.dispose()

    def _statements(self, script: str) -> list[str]:
        # Only pysqlite refuses multi-statement strings
        if self.dialect == "sqlite":
            return split_sql_statements(script)
        return [script] if script.strip() else []

    def ensure_control_table(self, bootstrap_sql: str) -> None:
        """Create the control table if it does not exist."""
        try:
            with self._engine.begin() as conn:
                for statement in self._statements(bootstrap_sql):
                    conn.exec_driver_sql(statement)
        except SQLAlchemyError as e:
            raise BackendError(f"Failed to create control table: {e}") from e

    def fetch_applied_migrations(self) -> list[AppliedMigration]:
        """Return applied migrations ordered by name.

        Rows are re-sorted byte-wise so the order does not depend on the
        database collation.
        """
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT name, checksum, executed_at FROM {CONTROL_TABLE}")
                ).all()
        except SQLAlchemyError as e:
            raise BackendError(f"Failed to fetch applied migrations: {e}") from e

        applied = [
            AppliedMigration(
                name=row.name,
                checksum=row.checksum,
                executed_at=str(row.executed_at) if row.executed_at else None,
            )
            for row in rows
        ]
        applied.sort(key=lambda record: record.name.encode("utf-8"))
        return applied

    def _record(
        self,
        conn: Connection,
        name: str,
        checksum: str,
        description: Optional[str],
        executed_by: Optional[str],
    ) -> None:
        conn.execute(
            text(
                f"INSERT INTO {CONTROL_TABLE} (name, checksum, description, executed_by) "
                "VALUES (:name, :checksum, :description, :executed_by)"
            ),
            {
                "name": name,
                "checksum": checksum,
                "description": description,
                "executed_by": executed_by,
            },
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
            BackendError: If the script fails, the insert fails, or the
                script issues its own BEGIN/COMMIT/ROLLBACK.
        """
        statements = self._statements(sql)
        logger.debug(f"{name}: {len(statements)} statement(s) on {self.dialect}")
        if offending := find_transaction_control(statements):
            raise BackendError(
                f"Migration {name} must not control transactions: {offending!r}"
            )

        try:
            with self._engine.begin() as conn:
                for statement in statements:
                    conn.exec_driver_sql(statement)
                self._record(
                    conn,
                    name,
                    checksum,
                    description,
                    executed_by or self._executed_by,
                )
        except SQLAlchemyError as e:
            raise BackendError(f"Failed to apply migration {name}: {e}") from e

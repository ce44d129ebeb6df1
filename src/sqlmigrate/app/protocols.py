"""Protocol definitions for sqlmigrate.

The reconciliation engine depends on these protocols rather than on a
concrete database driver. Any storage technology can be migrated as long
as it provides an object satisfying ``MigrationBackendProtocol``.

Protocol types enable:
- Swapping the database driver without touching the engine
- Testing the engine with in-memory fakes

Example:
    class MyBackend:
        def ensure_control_table(self, bootstrap_sql: str) -> None: ...
        def fetch_applied_migrations(self) -> list[AppliedMigration]: ...
        def apply_migration(self, name, sql, checksum, description=None,
                            executed_by=None) -> None: ...

    engine = MigrationEngine(MyBackend(), Path("migrations"))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..core.types import AppliedMigration, MigrationFile


# =============================================================================
# Backend Protocol
# =============================================================================


@runtime_checkable
class MigrationBackendProtocol(Protocol):
    """Protocol for storage backends the engine can migrate.

    All methods raise ``BackendError`` (or a subclass) on failure.
    """

    def ensure_control_table(self, bootstrap_sql: str) -> None:
        """Create the control table if it does not exist.

        Must be idempotent; it is called on every run.

        Args:
            bootstrap_sql: ``CREATE TABLE IF NOT EXISTS`` statement for the
                control table.
        """
        ...

    def fetch_applied_migrations(self) -> list[AppliedMigration]:
        """Return every control-table row ordered by name ascending."""
        ...

    def apply_migration(
        self,
        name: str,
        sql: str,
        checksum: str,
        description: Optional[str] = None,
        executed_by: Optional[str] = None,
    ) -> None:
        """Execute a migration and record it, atomically.

        The SQL script and the control-table insert must commit together
        or not at all.

        Args:
            name: Migration file name.
            sql: Script text to execute.
            checksum: Digest of the file content.
            description: Optional human-readable label.
            executed_by: Optional identity recorded with the row.
        """
        ...


# =============================================================================
# Progress Reporting
# =============================================================================


ProgressCallback = Callable[["MigrationFile"], None]
"""Called once for each migration after it has been applied."""

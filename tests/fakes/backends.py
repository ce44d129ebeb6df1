"""In-memory migration backend fakes for testing.

These implementations satisfy MigrationBackendProtocol without a real
database, so the engine can be tested in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from sqlmigrate.core.exceptions import BackendError
from sqlmigrate.core.types import AppliedMigration


@dataclass
class InMemoryBackend:
    """In-memory migration backend.

    Applying a migration appends its script to ``executed`` and its row to
    ``rows``; both happen or neither does. Names in ``fail_on`` raise
    BackendError on apply.
    """

    rows: list[dict] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)
    apply_calls: list[str] = field(default_factory=list)
    bootstrap_calls: list[str] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)
    fail_bootstrap: bool = False
    fail_fetch: bool = False

    def ensure_control_table(self, bootstrap_sql: str) -> None:
        """Record the bootstrap call."""
        if self.fail_bootstrap:
            raise BackendError("control table unavailable")
        self.bootstrap_calls.append(bootstrap_sql)

    def fetch_applied_migrations(self) -> list[AppliedMigration]:
        """Return rows ordered by name."""
        if self.fail_fetch:
            raise BackendError("connection lost")
        return [
            AppliedMigration(name=row["name"], checksum=row["checksum"])
            for row in sorted(self.rows, key=lambda row: row["name"])
        ]

    def apply_migration(
        self,
        name: str,
        sql: str,
        checksum: str,
        description: Optional[str] = None,
        executed_by: Optional[str] = None,
    ) -> None:
        """Apply a migration, failing for names in fail_on."""
        self.apply_calls.append(name)
        if name in self.fail_on:
            raise BackendError(f"syntax error in {name}")
        if any(row["name"] == name for row in self.rows):
            raise BackendError(f"UNIQUE constraint failed: __migrations.name ({name})")
        self.executed.append(sql)
        self.rows.append(
            {
                "name": name,
                "checksum": checksum,
                "description": description,
                "executed_by": executed_by,
            }
        )

    def seed(self, name: str, checksum: str) -> None:
        """Insert a control-table row as if applied by an earlier run."""
        self.rows.append({"name": name, "checksum": checksum})

    @property
    def applied_names(self) -> list[str]:
        return [row["name"] for row in self.rows]

"""Reconciliation engine.

Brings a backend's control table up to date with a migrations directory.
A run moves through these states::

    BOOTSTRAPPING -> DIFFING -> VALIDATING -> APPLYING -> DONE

and ends in FAILED if any step raises. The engine is sequential: files
are applied one at a time in name order, each in its own transaction,
and the first failure stops the run. Nothing is retried.

Two processes reconciling the same backend at once are not coordinated;
the control table's primary key is the only guard against double apply.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from loguru import logger

from ..core.exceptions import ChecksumMismatchError, MigrationOrderError, ReadFileError
from ..core.types import (
    AppliedMigration,
    ChecksumDrift,
    MigrationFile,
    MigrationStatus,
    ReconcileResult,
    ReconcileState,
)
from .catalog import list_migrations

if TYPE_CHECKING:
    from ..app.protocols import MigrationBackendProtocol, ProgressCallback


CONTROL_TABLE = "__migrations"

BOOTSTRAP_MIGRATIONS_SQL = f"""
CREATE TABLE IF NOT EXISTS {CONTROL_TABLE} (
    name TEXT PRIMARY KEY,
    checksum TEXT NOT NULL,
    description TEXT,
    executed_by TEXT,
    executed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""


def _log_applied(migration: MigrationFile) -> None:
    logger.info(f"Applied migration: {migration.name}")


class MigrationEngine:
    """Applies pending SQL migrations to a backend.

    Example:
        backend = SQLiteBackend(db)
        engine = MigrationEngine(backend, Path("migrations"))
        result = engine.reconcile()
        print(f"Applied {result.applied_count} migration(s)")
    """

    def __init__(
        self,
        backend: "MigrationBackendProtocol",
        migrations_dir: Path | str = "migrations",
        *,
        strict_names: bool = False,
        executed_by: Optional[str] = None,
        on_applied: Optional["ProgressCallback"] = None,
    ):
        """Initialize the engine.

        Args:
            backend: Storage backend implementing the migration protocol.
            migrations_dir: Directory containing ``.sql`` files.
            strict_names: Fail when an applied name does not match the file
                at the same position, instead of skipping it.
            executed_by: Identity recorded with each applied migration.
            on_applied: Progress callback invoked after each applied file.
                Defaults to an info log line.
        """
        self.backend = backend
        self.migrations_dir = Path(migrations_dir)
        self.strict_names = strict_names
        self.executed_by = executed_by
        self._on_applied = on_applied or _log_applied
        self.state = ReconcileState.BOOTSTRAPPING

    def _transition(self, state: ReconcileState) -> None:
        logger.debug(f"Reconcile state: {self.state.value} -> {state.value}")
        self.state = state

    def _load(self) -> tuple[list[AppliedMigration], list[MigrationFile]]:
        """Bootstrap the control table and read both sides of the diff."""
        self._transition(ReconcileState.BOOTSTRAPPING)
        self.backend.ensure_control_table(BOOTSTRAP_MIGRATIONS_SQL)

        self._transition(ReconcileState.DIFFING)
        applied = self.backend.fetch_applied_migrations()
        files = list_migrations(self.migrations_dir)
        logger.debug(f"{len(applied)} applied, {len(files)} on disk")
        return applied, files

    def _validate(
        self, applied: list[AppliedMigration], files: list[MigrationFile]
    ) -> list[str]:
        """Check the applied prefix against the files on disk.

        Returns:
            Names tolerated as naming drift.

        Raises:
            ChecksumMismatchError: If an applied file's content changed.
            MigrationOrderError: On naming drift when ``strict_names`` is set.
        """
        self._transition(ReconcileState.VALIDATING)
        skipped = []

        # Applied records beyond the last file are not checked
        for i, (record, migration) in enumerate(zip(applied, files)):
            if record.name != migration.name:
                if self.strict_names:
                    raise MigrationOrderError(i, record.name, migration.name)
                logger.warning(
                    f"Applied migration {record.name!r} does not match "
                    f"{migration.name!r} at position {i}, skipping checksum check"
                )
                skipped.append(migration.name)
                continue

            if record.checksum != migration.checksum:
                raise ChecksumMismatchError(
                    migration.name, record.checksum, migration.checksum
                )

        if len(applied) > len(files):
            logger.debug(
                f"{len(applied) - len(files)} applied migration(s) have no file on disk"
            )

        return skipped

    @staticmethod
    def _decode(migration: MigrationFile) -> str:
        try:
            return migration.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReadFileError(migration.name) from e

    def _apply(self, migration: MigrationFile) -> None:
        """Decode and apply a single migration."""
        sql = self._decode(migration)

        logger.debug(f"Applying migration {migration.name} ({migration.checksum[:12]})")
        self.backend.apply_migration(
            migration.name,
            sql,
            migration.checksum,
            description=migration.description,
            executed_by=self.executed_by,
        )
        self._on_applied(migration)

    def reconcile(self, dry_run: bool = False) -> ReconcileResult:
        """Apply all pending migrations.

        Args:
            dry_run: Validate and report what would be applied without
                applying anything.

        Returns:
            ReconcileResult naming the applied (or plannable) migrations.

        Raises:
            BackendError: If the backend fails.
            MigrationIOError: If the migrations cannot be read.
            ChecksumMismatchError: If an applied migration was edited.
            ReadFileError: If a pending migration is not valid UTF-8.
            MigrationOrderError: On naming drift in strict mode.
        """
        result = ReconcileResult(dry_run=dry_run)
        try:
            applied, files = self._load()
            result.skipped = self._validate(applied, files)

            pending = files[len(applied):]
            self._transition(ReconcileState.APPLYING)
            for migration in pending:
                if dry_run:
                    self._decode(migration)
                else:
                    self._apply(migration)
                result.applied.append(migration.name)

            self._transition(ReconcileState.DONE)
        except Exception as e:
            self._transition(ReconcileState.FAILED)
            logger.error(f"Migration run failed: {e}")
            raise

        result.state = self.state
        if not dry_run:
            logger.info(f"Applied {result.applied_count} migration(s)")
        return result

    def plan(self) -> ReconcileResult:
        """Report the migrations ``reconcile()`` would apply."""
        return self.reconcile(dry_run=True)

    def status(self) -> MigrationStatus:
        """Compare the migrations directory with the recorded history.

        Unlike ``reconcile()``, checksum drift is reported rather than
        raised. Pending files follow the same positional rule as
        ``reconcile()``.

        Returns:
            MigrationStatus with applied, pending, modified and missing entries.
        """
        try:
            applied, files = self._load()
        except Exception as e:
            self._transition(ReconcileState.FAILED)
            logger.error(f"Migration status failed: {e}")
            raise

        on_disk = {migration.name: migration for migration in files}

        modified = []
        missing = []
        for record in applied:
            migration = on_disk.get(record.name)
            if migration is None:
                missing.append(record.name)
            elif migration.checksum != record.checksum:
                modified.append(
                    ChecksumDrift(record.name, record.checksum, migration.checksum)
                )

        self._transition(ReconcileState.DONE)
        return MigrationStatus(
            applied=applied,
            pending=files[len(applied):],
            modified=modified,
            missing=missing,
        )


def run_migrations(
    backend: "MigrationBackendProtocol",
    migrations_dir: Path | str = "migrations",
    **kwargs,
) -> ReconcileResult:
    """Reconcile ``backend`` with ``migrations_dir``.

    Convenience wrapper around ``MigrationEngine(...).reconcile()``.
    Keyword arguments are passed to ``MigrationEngine``.
    """
    return MigrationEngine(backend, migrations_dir, **kwargs).reconcile()

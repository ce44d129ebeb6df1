"""Status command for sqlmigrate CLI."""

from ...core.config import Config
from ...core.types import MigrationStatus
from ...migrations.engine import MigrationEngine
from .backend import open_backend


def handle_status(args, config: Config) -> None:
    """Handle status command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    with open_backend(config) as backend:
        status = MigrationEngine(backend, config.migrations_dir).status()
    _print_status(status)


def _print_status(status: MigrationStatus) -> None:
    """Print status information.

    Args:
        status: MigrationStatus object to display.
    """
    print("Migration Status")
    print("=" * 50)
    print(f"Applied: {len(status.applied)}")
    print(f"Pending: {len(status.pending)}")
    print()

    for record in status.applied:
        when = f" ({record.executed_at})" if record.executed_at else ""
        print(f"  [x] {record.name}{when}")
    for migration in status.pending:
        print(f"  [ ] {migration.name}")

    if status.modified:
        print()
        print("Modified since applied:")
        for drift in status.modified:
            print(f"  ! {drift.name}: expected {drift.expected}, found {drift.found}")

    if status.missing:
        print()
        print("Applied but missing on disk:")
        for name in status.missing:
            print(f"  - {name}")

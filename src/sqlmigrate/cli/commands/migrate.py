"""Migrate command for sqlmigrate CLI."""

from ...core.config import Config
from ...core.types import MigrationFile
from ...migrations.engine import MigrationEngine
from .backend import open_backend


def _print_applied(migration: MigrationFile) -> None:
    print(f"Applied migration: {migration.name}")


def handle_migrate(args, config: Config) -> None:
    """Handle migrate command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.

    Raises:
        MigrationError: If the run fails.
    """
    with open_backend(config) as backend:
        engine = MigrationEngine(
            backend,
            config.migrations_dir,
            strict_names=config.strict_names,
            executed_by=config.executed_by,
            on_applied=_print_applied,
        )

        if args.dry_run:
            result = engine.plan()
            if not result.applied:
                print("Database is up to date.")
            for name in result.applied:
                print(f"Would apply: {name}")
            return

        result = engine.reconcile()
        if not result.applied:
            print("Database is up to date.")

"""Backend selection shared by CLI commands."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from loguru import logger

from ...app.protocols import MigrationBackendProtocol
from ...core.config import Config
from ...store.backend import SQLiteBackend
from ...store.database import Database
from ...store.sqlalchemy_backend import SQLAlchemyBackend


def add_backend_arguments(parser) -> None:
    """Add database and migrations-directory options to a subcommand parser."""
    parser.add_argument(
        "-d",
        "--dir",
        dest="migrations_dir",
        help="Migrations directory (default: $MIGRATIONS_DIR or ./migrations)",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--db",
        dest="db_path",
        help="SQLite database file (default: $LIBSQL_DB_PATH or migrations.db)",
    )
    target.add_argument(
        "--url",
        dest="database_url",
        help="SQLAlchemy database URL (default: $DATABASE_URL)",
    )
    parser.add_argument(
        "--executed-by",
        help="Identity recorded with applied migrations (default: system)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail when applied history and files disagree on names",
    )


def apply_overrides(args, config: Config) -> Config:
    """Apply command-line options on top of the environment configuration.

    Args:
        args: Parsed command arguments.
        config: Configuration loaded from the environment.

    Returns:
        The updated configuration.
    """
    if getattr(args, "migrations_dir", None):
        config.migrations_dir = Path(args.migrations_dir)
    if getattr(args, "db_path", None):
        config.db_path = Path(args.db_path)
        config.database_url = None
    if getattr(args, "database_url", None):
        config.database_url = args.database_url
    if getattr(args, "executed_by", None):
        config.executed_by = args.executed_by
    if getattr(args, "strict", None):
        config.strict_names = True
    return config


@contextmanager
def open_backend(config: Config) -> Iterator[MigrationBackendProtocol]:
    """Open the backend selected by the configuration.

    A database URL selects the SQLAlchemy backend; otherwise the SQLite
    file at ``config.db_path`` is used.

    Yields:
        A ready-to-use migration backend.
    """
    if config.database_url:
        logger.debug(f"Using SQLAlchemy backend for {config.database_url}")
        backend = SQLAlchemyBackend(config.database_url, executed_by=config.executed_by)
        try:
            yield backend
        finally:
            backend.close()
        return

    logger.debug(f"Using SQLite backend at {config.db_path}")
    with Database(config.db_path) as db:
        yield SQLiteBackend(db, executed_by=config.executed_by)

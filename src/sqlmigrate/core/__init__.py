"""Core types, configuration and errors for sqlmigrate."""

from .config import Config
from .exceptions import (
    BackendError,
    ChecksumMismatchError,
    ConfigError,
    DatabaseError,
    DuplicateMigrationError,
    MigrationError,
    MigrationIOError,
    MigrationOrderError,
    ReadFileError,
)
from .types import (
    AppliedMigration,
    ChecksumDrift,
    MigrationFile,
    MigrationStatus,
    ReconcileResult,
    ReconcileState,
)

__all__ = [
    "Config",
    "MigrationError",
    "ConfigError",
    "BackendError",
    "DatabaseError",
    "MigrationIOError",
    "ChecksumMismatchError",
    "ReadFileError",
    "DuplicateMigrationError",
    "MigrationOrderError",
    "AppliedMigration",
    "ChecksumDrift",
    "MigrationFile",
    "MigrationStatus",
    "ReconcileResult",
    "ReconcileState",
]

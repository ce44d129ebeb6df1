"""Custom exceptions for sqlmigrate."""

from pathlib import Path


class MigrationError(Exception):
    """Base exception for all sqlmigrate errors."""

    pass


class ConfigError(MigrationError):
    """Configuration is invalid or incomplete."""

    pass


class BackendError(MigrationError):
    """Storage backend operation failed.

    Wraps any driver-specific failure (connection loss, SQL error,
    constraint violation). The original exception is kept as ``__cause__``
    when raised with ``raise ... from``.
    """

    pass


class DatabaseError(BackendError):
    """SQLite database operation failed."""

    pass


class MigrationIOError(MigrationError):
    """Migrations directory or a migration file could not be read."""

    def __init__(self, message: str, path: Path | str | None = None):
        """Initialize exception with message and offending path.

        Args:
            message: Human-readable description of the failure.
            path: Directory or file that could not be read.
        """
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class ChecksumMismatchError(MigrationError):
    """An already-applied migration file was changed on disk."""

    def __init__(self, name: str, expected: str, found: str):
        """Initialize exception with migration name and both checksums.

        Args:
            name: Migration file name.
            expected: Checksum recorded in the control table.
            found: Checksum computed from the file on disk.
        """
        self.name = name
        self.expected = expected
        self.found = found
        super().__init__(
            f"Checksum mismatch for migration {name}. Expected {expected}, found {found}"
        )


class ReadFileError(MigrationError):
    """Migration file content could not be decoded as text."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Failed to read migration file {name}")


class DuplicateMigrationError(MigrationError):
    """Two catalog entries share the same migration name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate migration name: {name}")


class MigrationOrderError(MigrationError):
    """Applied history does not line up with the files on disk."""

    def __init__(self, position: int, applied_name: str, file_name: str):
        """Initialize exception with the diverging position.

        Args:
            position: Zero-based index where the sequences diverge.
            applied_name: Name recorded in the control table at that index.
            file_name: Name of the file on disk at that index.
        """
        self.position = position
        self.applied_name = applied_name
        self.file_name = file_name
        super().__init__(
            f"Migration order mismatch at position {position}: "
            f"applied {applied_name!r}, found {file_name!r} on disk"
        )

"""Migration catalog.

Discovers the ``.sql`` files of a migrations directory, orders them by
name and fingerprints their content. The catalog keeps no state between
calls: every listing reads the directory and the files again.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from loguru import logger

from ..core.exceptions import DuplicateMigrationError, MigrationIOError
from ..core.types import MigrationFile
from ..utils.hashing import sha256_hash_bytes

MIGRATION_SUFFIX = ".sql"


def _sort_key(path: Path) -> bytes:
    # Byte-wise ordering, so 0010_ sorts after 0009_ only when zero-padded
    return path.name.encode("utf-8")


def discover_migration_paths(directory: Path | str) -> list[Path]:
    """List migration file paths in a directory, ordered by name.

    Only regular files whose suffix is exactly ``.sql`` are kept;
    directories and files with other extensions (including ``.SQL``)
    are skipped.

    Args:
        directory: Directory to scan.

    Returns:
        Paths sorted by byte-wise comparison of their file names.

    Raises:
        MigrationIOError: If the directory cannot be read, or a
            migration file name is not valid UTF-8.
    """
    directory = Path(directory)
    try:
        entries = list(directory.iterdir())
    except OSError as e:
        raise MigrationIOError(
            f"Failed to read migrations directory {directory}: {e}", directory
        ) from e

    paths = []
    for entry in entries:
        if entry.suffix != MIGRATION_SUFFIX:
            continue
        try:
            is_file = entry.is_file()
        except OSError as e:
            raise MigrationIOError(f"Failed to stat {entry}: {e}", entry) from e
        if not is_file:
            logger.debug(f"Skipping non-file entry: {entry.name}")
            continue
        try:
            entry.name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise MigrationIOError(
                f"Migration file name is not valid UTF-8: {entry.name!r}", entry
            ) from e
        paths.append(entry)

    paths.sort(key=_sort_key)
    return paths


def read_migration(path: Path) -> MigrationFile:
    """Read a migration file and compute its checksum.

    Args:
        path: Path to the ``.sql`` file.

    Returns:
        MigrationFile with raw content and checksum.

    Raises:
        MigrationIOError: If the file cannot be read.
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise MigrationIOError(f"Failed to read migration file {path}: {e}", path) from e

    return MigrationFile(
        name=path.name,
        content=content,
        checksum=sha256_hash_bytes(content),
        path=path,
    )


def ensure_unique_names(files: Iterable[MigrationFile]) -> None:
    """Reject catalogs in which two files share a name.

    Raises:
        DuplicateMigrationError: On the first repeated name.
    """
    seen: set[str] = set()
    for migration in files:
        if migration.name in seen:
            raise DuplicateMigrationError(migration.name)
        seen.add(migration.name)


def list_migrations(directory: Path | str) -> list[MigrationFile]:
    """Discover, order, read and fingerprint the migrations in a directory.

    Args:
        directory: Directory containing ``.sql`` migration files.

    Returns:
        MigrationFile objects in application order.

    Raises:
        MigrationIOError: If the directory or a file cannot be read.
        DuplicateMigrationError: If two files share a name.
    """
    files = [read_migration(path) for path in discover_migration_paths(directory)]
    ensure_unique_names(files)
    logger.debug(f"Found {len(files)} migration file(s) in {directory}")
    return files

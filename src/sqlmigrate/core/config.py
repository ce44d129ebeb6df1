"""Configuration management for sqlmigrate."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


@dataclass
class Config:
    """Main application configuration."""

    migrations_dir: Path = field(default_factory=lambda: Path("migrations"))
    db_path: Path = field(default_factory=lambda: Path("migrations.db"))
    database_url: Optional[str] = None  # Selects the SQLAlchemy backend when set
    executed_by: str = "system"
    strict_names: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Raises:
            ConfigError: If a boolean variable holds an unrecognized value.
        """
        config = cls()

        if path := os.environ.get("MIGRATIONS_DIR"):
            config.migrations_dir = Path(path)

        # LIBSQL_DB_PATH is kept for databases created by earlier tooling
        if path := os.environ.get("SQLMIGRATE_DB_PATH") or os.environ.get("LIBSQL_DB_PATH"):
            config.db_path = Path(path)

        if url := os.environ.get("DATABASE_URL"):
            config.database_url = url

        if user := os.environ.get("MIGRATION_EXECUTED_BY"):
            config.executed_by = user

        if strict := os.environ.get("MIGRATION_STRICT_NAMES"):
            config.strict_names = _parse_bool("MIGRATION_STRICT_NAMES", strict)

        return config

"""Injectable interfaces for sqlmigrate."""

from .protocols import MigrationBackendProtocol, ProgressCallback

__all__ = [
    "MigrationBackendProtocol",
    "ProgressCallback",
]

"""Test fakes for testing without a real database.

Example:
    from tests.fakes import InMemoryBackend

    backend = InMemoryBackend()
    MigrationEngine(backend, migrations_dir).reconcile()
    assert backend.applied_names == ["0001_init.sql"]
"""

from .backends import InMemoryBackend

__all__ = [
    "InMemoryBackend",
]

"""Command implementations for sqlmigrate CLI."""

from .backend import add_backend_arguments, apply_overrides, open_backend
from .migrate import handle_migrate
from .status import handle_status

__all__ = [
    "add_backend_arguments",
    "apply_overrides",
    "open_backend",
    "handle_migrate",
    "handle_status",
]

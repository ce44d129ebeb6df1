"""Type definitions for sqlmigrate."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

_NUMERIC_PREFIX = re.compile(r"^[0-9]+[_\-.]*")


class ReconcileState(Enum):
    """Stage of a reconciliation run."""

    BOOTSTRAPPING = "bootstrapping"
    DIFFING = "diffing"
    VALIDATING = "validating"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationFile:
    """A migration discovered on disk.

    Attributes:
        name: File base name, used as the migration's primary key.
        content: Raw file bytes.
        checksum: SHA-256 hex digest of ``content``.
        path: Location the file was read from.
    """

    name: str
    content: bytes = field(repr=False)
    checksum: str
    path: Optional[Path] = None

    @property
    def description(self) -> str:
        """Human-readable label derived from the file name.

        ``0002_add_users.sql`` becomes ``add users``.
        """
        stem = self.name[: -len(".sql")] if self.name.endswith(".sql") else self.name
        label = _NUMERIC_PREFIX.sub("", stem)
        label = label.replace("_", " ").replace("-", " ").strip()
        return label or stem


@dataclass(frozen=True)
class AppliedMigration:
    """A row of the control table."""

    name: str
    checksum: str
    executed_at: Optional[str] = None


@dataclass(frozen=True)
class ChecksumDrift:
    """An applied migration whose file content changed since it ran."""

    name: str
    expected: str
    found: str


@dataclass
class ReconcileResult:
    """Outcome of a reconciliation run.

    Attributes:
        applied: Names applied during this run (or that would be, on a dry run).
        skipped: Names tolerated as naming drift in the validated prefix.
        state: Final engine state.
        dry_run: Whether the run only planned changes.
    """

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    state: ReconcileState = ReconcileState.DONE
    dry_run: bool = False

    @property
    def applied_count(self) -> int:
        return len(self.applied)


@dataclass
class MigrationStatus:
    """Comparison of on-disk migrations with the recorded history."""

    applied: list[AppliedMigration] = field(default_factory=list)
    pending: list[MigrationFile] = field(default_factory=list)
    modified: list[ChecksumDrift] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def is_up_to_date(self) -> bool:
        """True when nothing is pending and no applied file has drifted."""
        return not self.pending and not self.modified

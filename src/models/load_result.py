from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .canonical_fields import CanonicalField

"""Load result models for the catalogue metrics pipeline.

A load is one logical transaction: read -> normalize -> derive -> commit to the
record store. LoadResult summarizes what happened so the CLI can render a
SUMMARY line and callers can inspect diagnostics without parsing logs.
"""

__all__ = [
    "LoadStatus",
    "CoercionIssue",
    "FieldResolution",
    "LoadResult",
]


class LoadStatus(Enum):
    """Status of a dataset load.

    A load ends in exactly one of these states.

    - STALE: the load finished after a newer load had already committed, so its
      records were discarded.
    """
    SUCCESS = "success"
    FAILED = "failed"
    STALE = "stale"


@dataclass(frozen=True)
class CoercionIssue:
    """A non-blank cell that could not be coerced to its field's type."""
    row_number: int
    field: CanonicalField
    column: str
    raw_value: str


@dataclass(frozen=True)
class FieldResolution:
    """Which source column (and which candidate spelling) supplied a field."""
    field: CanonicalField
    column: str | None
    candidate: str | None = None

    @property
    def found(self) -> bool:
        return self.column is not None


@dataclass(frozen=True)
class LoadResult:
    """Aggregated outcome of one load."""
    source: str
    status: LoadStatus
    load_id: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    raw_rows: int = 0
    blank_rows: int = 0
    record_count: int = 0
    resolutions: list[FieldResolution] = field(default_factory=list)
    issues: list[CoercionIssue] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is LoadStatus.SUCCESS

    @property
    def missing_fields(self) -> list[CanonicalField]:
        return [r.field for r in self.resolutions if not r.found]

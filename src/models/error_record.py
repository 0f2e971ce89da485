from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for diagnostics logging.

ErrorRecord is the JSON Lines unit written by the diagnostics buffer. row=-1 is the
sentinel for dataset-level problems where no single row is responsible, and
field="" marks records that are not tied to one canonical field.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured diagnostics record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: CSV path or URL being loaded
        row: Row number (1-based). Use -1 for dataset-level errors
        field: Canonical field name, or "" when not field specific
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    source: str
    row: int  # 不明な場合 -1
    field: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(source: str, row: int, field: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            row=row,
            field=field,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry with exactly the dataclass keys."""
        return json.dumps(asdict(self), ensure_ascii=False)

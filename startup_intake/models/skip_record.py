from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""SkipRecord model for the skip log.

One SkipRecord is written per dropped data row, and one per file that could
not be ingested at all. File-level entries use row=-1 as a sentinel since no
single row is to blame (empty file, header-only file).

The JSON Lines key set is fixed: timestamp, file, row, reason, missing_fields.
"""

__all__ = [
    "SkipRecord",
    "FILE_LEVEL_ROW",
]

FILE_LEVEL_ROW = -1


@dataclass(frozen=True)
class SkipRecord:
    """Structured skip entry for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being ingested
        row: 1-based data row index, or -1 for file-level failures
        reason: Skip reason (builder reason or exception message)
        missing_fields: Canonical fields that were absent (empty for file-level)
    """
    timestamp: str
    file: str
    row: int
    reason: str
    missing_fields: list[str]

    @staticmethod
    def create(file: str, row: int, reason: str, missing_fields: list[str] | None = None) -> SkipRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return SkipRecord(
            timestamp=ts,
            file=file,
            row=row,
            reason=reason,
            missing_fields=list(missing_fields or []),
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)

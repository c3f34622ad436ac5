from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.skip_record import FILE_LEVEL_ROW, SkipRecord

"""Skip log buffering.

Skipped rows (and files that could not be ingested) are collected during a
run and written once as JSON Lines to ``logs/skips-YYYYMMDD-HHMMSS.log``
(UTC). The file is created lazily on the first non-empty flush.
"""

__all__ = [
    "SkipRecord",
    "SkipLogBuffer",
    "FILE_LEVEL_ROW",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class SkipLogBuffer:
    """In-memory buffer of SkipRecords; flush() appends them as JSON Lines.

    Not thread-safe; the batch runner is sequential.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[SkipRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"skips-{stamp}.log"
        return self._file_path

    def append(self, record: SkipRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was buffered."""
        if not self._records:
            return self._file_path
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp

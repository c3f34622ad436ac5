from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Run-level result models for the batch CSV runner.

The pure pipeline reports per-batch IngestDiagnostics; these models aggregate
them across every file the CLI processed so a single SUMMARY line can be
rendered.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    records: int
    skipped_rows: int
    missing_scores: int
    founders: int
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class IngestRunResult:
    """Aggregated results for one CLI run."""
    success_files: int
    failed_files: int
    total_records: int
    skipped_rows: int
    missing_scores: int
    total_founders: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float  # records / elapsed
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

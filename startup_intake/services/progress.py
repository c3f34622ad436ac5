from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""File-level progress bar for the batch runner (tqdm, TTY only).

In non-TTY environments (CI, piped output) no bar is created so log lines are
not interleaved with ANSI control sequences. The postfix carries running
totals for the run: records built, rows skipped, files failed.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """One bar over the CSV files of a run."""

    def __init__(self, total_files: int, *, description: str = "Ingesting CSV files") -> None:
        self.total_files = total_files
        self.description = description
        self.current_file = 0
        self.records = 0
        self.skipped = 0
        self.failed = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(total=total_files, desc=description, unit="file", leave=True, ncols=80, ascii=True)

    def start_file(self, file_path: Path) -> None:
        self.current_file += 1
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def finish_file(self, *, records: int = 0, skipped: int = 0, failed: bool = False) -> None:
        """Advance one file; ``records``/``skipped`` are this file's counts."""
        self.records += records
        self.skipped += skipped
        if failed:
            self.failed += 1
        if self.pbar is None:
            return
        self.pbar.update(1)
        self.pbar.set_postfix(records=self.records, skipped=self.skipped, failed=self.failed)
        self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""CsvPreview model consumed by column-mapping UIs (read-only)."""

__all__ = [
    "CsvPreview",
]


@dataclass(frozen=True)
class CsvPreview:
    headers: list[str]
    sample_rows: list[list[str]]  # at most sample_size rows
    row_count: int  # full data size, header excluded (not len(sample_rows))

    def as_dict(self) -> dict[str, Any]:
        return {
            "headers": list(self.headers),
            "sample_rows": [list(r) for r in self.sample_rows],
            "row_count": self.row_count,
        }

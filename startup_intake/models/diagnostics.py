from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""IngestDiagnostics: the per-batch report returned next to the records.

Diagnostics are not errors. They describe how many data rows were seen,
how many became records, how many were skipped (and why), and how many
accepted rows had their score defaulted to 0.
"""

__all__ = [
    "SkipReason",
    "IngestDiagnostics",
]


@dataclass(frozen=True)
class SkipReason:
    """Why a single data row was dropped.

    Attributes:
        row: 1-based data row index (header excluded)
        reason: Human readable reason, e.g. "missing required field(s): sector"
        missing_fields: Canonical field names that were absent
    """
    row: int
    reason: str
    missing_fields: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, Any]:
        return {"row": self.row, "reason": self.reason}


@dataclass(frozen=True)
class IngestDiagnostics:
    total_rows: int = 0  # data rows seen (header excluded)
    parsed: int = 0
    skipped: int = 0
    missing_scores: int = 0
    skip_reasons: tuple[SkipReason, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        """One-line caller-facing summary.

        >>> IngestDiagnostics(total_rows=5, parsed=4, skipped=1, missing_scores=2).describe()
        'parsed 4 of 5 rows; 1 skipped; 2 missing scores defaulted to 0'
        """
        text = f"parsed {self.parsed} of {self.total_rows} rows"
        if self.skipped:
            text += f"; {self.skipped} skipped"
        if self.missing_scores:
            text += f"; {self.missing_scores} missing scores defaulted to 0"
        return text

    def as_dict(self) -> dict[str, Any]:
        return {
            "parsed": self.parsed,
            "skipped": self.skipped,
            "missing_scores": self.missing_scores,
            "skip_reasons": [r.as_dict() for r in self.skip_reasons],
        }

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..models.diagnostics import IngestDiagnostics
from ..models.founder import FounderEntity
from ..models.record import NormalizedRecord
from ..parsing.reader import EmptyInputError, tokenize
from .column_mapper import resolve_mapping
from .founder_extractor import extract_founders_from_records
from .record_builder import build_records

"""Ingestion facade: raw CSV text in, records + diagnostics out.

tokenize -> resolve mapping (explicit replaces heuristic) -> build records
-> extract founders. Pure and synchronous; safe to call concurrently on
independent inputs.
"""

__all__ = [
    "IngestResult",
    "ingest_text",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    records: list[NormalizedRecord]
    diagnostics: IngestDiagnostics
    mapping: Mapping[str, str]
    founders: list[FounderEntity] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "records": [r.as_dict() for r in self.records],
            "diagnostics": self.diagnostics.as_dict(),
        }


def ingest_text(
    text: str,
    mapping: Mapping[str, str] | None = None,
    *,
    id_prefix: str = "startup",
    capture_unmapped: bool = False,
) -> IngestResult:
    """Ingest one CSV blob.

    Args:
        text: Decoded CSV text
        mapping: Explicit canonical field -> header mapping. When given, the
            heuristic mapper is not consulted at all.
        id_prefix: Prefix for record ids
        capture_unmapped: Keep values of unmapped columns in ``custom_data``

    Raises:
        EmptyInputError: no rows at all
        InsufficientRowsError: header without data rows
        MappingError: malformed explicit mapping
    """
    rows = tokenize(text)
    if not rows:
        raise EmptyInputError("CSV input is empty")
    resolved = resolve_mapping(rows[0], mapping)
    records, diagnostics = build_records(
        rows, resolved, id_prefix=id_prefix, capture_unmapped=capture_unmapped
    )
    founders = extract_founders_from_records(records)
    logger.debug(f"{diagnostics.describe()}; founders={len(founders)}")
    return IngestResult(records=records, diagnostics=diagnostics, mapping=resolved, founders=founders)

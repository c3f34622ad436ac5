"""Domain models for the startup CSV intake pipeline.

Records, diagnostics and founders are produced by the pure pipeline; the
run-level models (FileStat, IngestRunResult, SkipRecord) belong to the batch
runner.
"""

from .diagnostics import IngestDiagnostics, SkipReason
from .founder import FounderEntity, RosterFounder
from .preview import CsvPreview
from .processing_result import FileStat, IngestRunResult
from .record import (
    AiScores,
    BusinessModelInfo,
    CompanyInfo,
    CompetitiveInfo,
    DetailedMetrics,
    MarketInfo,
    NormalizedRecord,
    OpportunityInfo,
    ProductInfo,
    Rationale,
    RiskInfo,
    SalesInfo,
    TeamInfo,
)
from .skip_record import SkipRecord

__all__ = [
    # Pipeline models
    "NormalizedRecord",
    "CompanyInfo",
    "MarketInfo",
    "ProductInfo",
    "BusinessModelInfo",
    "SalesInfo",
    "TeamInfo",
    "CompetitiveInfo",
    "RiskInfo",
    "OpportunityInfo",
    "DetailedMetrics",
    "AiScores",
    "Rationale",
    "IngestDiagnostics",
    "SkipReason",
    "FounderEntity",
    "RosterFounder",
    "CsvPreview",
    # Run models
    "FileStat",
    "IngestRunResult",
    "SkipRecord",
]

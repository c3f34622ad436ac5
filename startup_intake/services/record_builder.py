from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from ..models.diagnostics import IngestDiagnostics, SkipReason
from ..models.record import (
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
from ..parsing.reader import InsufficientRowsError

"""Record builder: tokenized rows + column mapping -> NormalizedRecords.

Partial-failure policy: one malformed row never aborts the batch. Rows
missing ``name`` or ``sector`` are skipped and reported in the returned
IngestDiagnostics; a missing or unparsable score defaults to 0 and is counted,
but never causes a skip on its own.

The build is a map over data rows followed by a fold of the per-row outcomes,
so repeated calls on the same input produce equal results.
"""

__all__ = [
    "InsufficientRowsError",
    "REQUIRED_FIELDS",
    "RowReader",
    "build_records",
    "parse_number",
    "infer_field_type",
    "slugify_header",
]

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "sector")

# parseFloat 互換: 先頭の数値部分のみ解釈 ("12abc" -> 12.0)
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_NUMERIC_NOISE = re.compile(r"[%,$\s]")
_SLUG_NOISE = re.compile(r"[^a-z0-9]+")


def parse_number(value: str | None) -> float | None:
    """Parse a human-formatted number; None when nothing numeric leads the text.

    >>> parse_number("$1,200.50")
    1200.5
    >>> parse_number("45%")
    45.0
    >>> parse_number("n/a") is None
    True
    """
    if not value:
        return None
    cleaned = _NUMERIC_NOISE.sub("", value)
    match = _NUMERIC_PREFIX.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))


def slugify_header(header: str) -> str:
    return _SLUG_NOISE.sub("_", header.lower())


def infer_field_type(sample: str | None) -> str:
    """Classify a sample cell value for custom (unmapped) columns.

    Returns one of ``number``, ``date``, ``url``, ``boolean`` or ``text``.
    """
    if not sample:
        return "text"
    if re.fullmatch(r"\d+(\.\d+)?", re.sub(r"[,$%]", "", sample)):
        return "number"
    if re.match(r"\d{4}-\d{2}-\d{2}", sample) or re.match(r"\d{1,2}/\d{1,2}/\d{2,4}", sample):
        return "date"
    if re.match(r"https?://", sample) or sample.startswith("www."):
        return "url"
    if re.fullmatch(r"(?i)true|false|yes|no", sample):
        return "boolean"
    return "text"


class RowReader:
    """Mapped, trimmed access to one raw row.

    Lookups return None ("absent") when the field is unmapped, the mapped
    header is not in the header index, the row is too short, or the cell is
    empty after trimming.
    """

    def __init__(self, row: Sequence[str], mapping: Mapping[str, str], header_index: Mapping[str, int]) -> None:
        self.row = row
        self.mapping = mapping
        self.header_index = header_index

    def value(self, field: str) -> str | None:
        header = self.mapping.get(field)
        if not header:
            return None
        idx = self.header_index.get(header)
        if idx is None or idx >= len(self.row):
            return None
        cell = self.row[idx].strip()
        return cell or None

    def number(self, field: str) -> float | None:
        return parse_number(self.value(field))

    def first_value(self, *fields: str) -> str | None:
        for f in fields:
            v = self.value(f)
            if v is not None:
                return v
        return None

    def first_number(self, *fields: str) -> float | None:
        for f in fields:
            v = self.number(f)
            if v is not None:
                return v
        return None


@dataclass(frozen=True)
class _RowOutcome:
    record: NormalizedRecord | None
    skip: SkipReason | None
    missing_score: bool


def _build_row(
    row_number: int,
    reader: RowReader,
    id_prefix: str,
    custom_headers: Sequence[tuple[str, int]],
) -> _RowOutcome:
    name = reader.value("name")
    sector = reader.first_value("sector", "industry")

    missing = [f for f, v in zip(REQUIRED_FIELDS, (name, sector)) if v is None]
    if missing:
        reason = f"missing required field(s): {', '.join(missing)}"
        return _RowOutcome(record=None, skip=SkipReason(row_number, reason, tuple(missing)), missing_score=False)

    # スコア: score -> investment_score_overview -> 0
    score = reader.first_number("score", "investment_score_overview")
    missing_score = score is None
    if score is None:
        score = 0.0

    v = reader.value
    n = reader.number
    custom_data = {}
    for header, idx in custom_headers:
        if idx < len(reader.row) and reader.row[idx].strip():
            custom_data[slugify_header(header)] = reader.row[idx].strip()

    record = NormalizedRecord(
        id=f"{id_prefix}-{row_number}",
        name=name,
        sector=sector,
        stage=reader.first_value("stage", "status") or "",
        country=v("country") or "",
        description=v("description") or "",
        score=score,
        team=v("team") or "",
        metrics=v("metrics") or "",
        rank=n("rank"),
        arconic_llm_rules=v("arconic_llm_rules"),
        investment_score_overview=v("investment_score_overview"),
        company=CompanyInfo(
            website=v("website"),
            urls=v("urls"),
            linkedin=reader.first_value("linkedin_url", "linkedin"),
            headquarters=reader.first_value("location", "headquarters"),
            founded=reader.first_value("founding_year", "founded"),
            founders=v("founders"),
            employee_count=reader.first_number("employee_size", "num_employees", "employee_count"),
            funding_raised=v("funding_raised"),
            area=v("area"),
            venture_capital_firm=v("venture_capital_firm"),
            location=v("location"),
            investment_date=v("investment_date"),
        ),
        market=MarketInfo(
            industry=reader.first_value("industry", "sector"),
            sub_industry=v("sub_industry"),
            market_size=v("market_size"),
            ai_disruption_propensity=v("ai_disruption_propensity"),
            target_persona=v("target_persona"),
            b2b_or_b2c=v("b2b_or_b2c"),
            market_competition_analysis=v("market_competition_analysis"),
        ),
        product=ProductInfo(
            product_name=v("product_name"),
            problem_solved=v("problem_solved"),
            horizontal_or_vertical=v("horizontal_or_vertical"),
            moat=v("moat"),
        ),
        business_model=BusinessModelInfo(
            revenue_model=v("revenue_model"),
            pricing_strategy=v("pricing_strategy"),
            unit_economics=v("unit_economics"),
        ),
        sales=SalesInfo(
            sales_motion=v("sales_motion"),
            sales_cycle_length=v("sales_cycle_length"),
            gtm_strategy=v("gtm_strategy"),
            channels=v("channels"),
            sales_complexity=v("sales_complexity"),
        ),
        team_info=TeamInfo(
            key_team_members=v("key_team_members"),
            team_depth=v("team_depth"),
            founders_education=v("founders_education"),
            founders_prior_experience=v("founders_prior_experience"),
            team_execution_assessment=v("team_execution_assessment"),
        ),
        competitive=CompetitiveInfo(
            competitors=v("competitors"),
            industry_multiples=v("industry_multiples"),
        ),
        risk=RiskInfo(regulatory_risk=v("regulatory_risk")),
        opportunity=OpportunityInfo(exit_potential=v("exit_potential")),
        detailed_metrics=DetailedMetrics(
            arr=v("arr"),
            growth=v("growth"),
            team_size=n("team_size"),
            funding_stage=v("funding_stage"),
        ),
        ai_scores=AiScores(
            llm=score,
            ml=n("machine_learning_score") or 0.0,
            xg_boost=n("xg_boost"),
            light_gbm=n("light_gbm"),
        ),
        rationale=Rationale(
            key_strengths=v("key_strengths"),
            areas_of_concern=v("areas_of_concern"),
        ),
        custom_data=custom_data,
    )
    return _RowOutcome(record=record, skip=None, missing_score=missing_score)


def build_records(
    rows: Sequence[Sequence[str]],
    mapping: Mapping[str, str],
    *,
    id_prefix: str = "startup",
    capture_unmapped: bool = False,
) -> tuple[list[NormalizedRecord], IngestDiagnostics]:
    """Build normalized records from tokenized rows.

    Args:
        rows: Tokenized rows; row 0 is the header
        mapping: Canonical field -> source header (not mutated)
        id_prefix: Record ids are ``"{id_prefix}-{row_number}"``
        capture_unmapped: Copy cells of unmapped headers into ``custom_data``

    Returns:
        (records, diagnostics)

    Raises:
        InsufficientRowsError: fewer than 2 rows (header + one data row)
    """
    if len(rows) < 2:
        raise InsufficientRowsError("CSV must contain headers and at least one data row")

    frozen_mapping = MappingProxyType(dict(mapping))
    headers = list(rows[0])
    header_index = {h: i for i, h in enumerate(headers)}  # 重複ヘッダは後勝ち

    custom_headers: list[tuple[str, int]] = []
    if capture_unmapped:
        used = set(frozen_mapping.values())
        custom_headers = [(h, header_index[h]) for h in header_index if h and h not in used]

    outcomes = [
        _build_row(row_number, RowReader(row, frozen_mapping, header_index), id_prefix, custom_headers)
        for row_number, row in enumerate(rows[1:], start=1)
    ]

    records = [o.record for o in outcomes if o.record is not None]
    skips = tuple(o.skip for o in outcomes if o.skip is not None)
    for skip in skips:
        logger.warning(f"skipping row {skip.row}: {skip.reason}")

    diagnostics = IngestDiagnostics(
        total_rows=len(outcomes),
        parsed=len(records),
        skipped=len(skips),
        missing_scores=sum(1 for o in outcomes if o.missing_score),
        skip_reasons=skips,
    )
    logger.debug(diagnostics.describe())
    return records, diagnostics

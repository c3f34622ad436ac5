from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..models.record import NormalizedRecord

"""CSV export of normalized records (inverse of ingestion).

The export schema is fixed by EXPORT_COLUMNS and is independent of whatever
column mapping was used at ingest time; export and import headers need not be
symmetric.
"""

__all__ = [
    "EXPORT_COLUMNS",
    "NO_DATA_SENTINEL",
    "escape_field",
    "record_to_row",
    "serialize_records",
]

NO_DATA_SENTINEL = "No data to export"

EXPORT_COLUMNS: tuple[str, ...] = (
    "Name",
    "Description",
    "Sector",
    "Stage",
    "Country",
    "Pipeline Stage",
    "Rank",
    "Score",
    "LLM Score",
    "ML Score",
    "XGBoost Score",
    "LightGBM Score",
    "Website",
    "LinkedIn",
    "Founded",
    "Headquarters",
    "Employee Count",
    "Funding Raised",
    "Industry",
    "Sub-Industry",
    "Market Size",
    "B2B/B2C",
    "Target Persona",
    "Problem Solved",
    "Moat",
    "Revenue Model",
    "Pricing Strategy",
    "Unit Economics",
    "Sales Motion",
    "GTM Strategy",
    "Key Team Members",
    "Founders Education",
    "Founders Prior Experience",
    "Competitors",
    "Regulatory Risk",
    "Exit Potential",
)


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    # 整数値の float は "80" として出力 ("80.0" にしない)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_field(value: Any) -> str:
    """Stringify and quote a value when it contains a comma, quote or newline.

    >>> escape_field('say "hi", twice')
    '"say ""hi"", twice"'
    >>> escape_field(None)
    ''
    """
    text = _to_text(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def record_to_row(record: NormalizedRecord) -> list[Any]:
    """Values for one record in EXPORT_COLUMNS order (falsy group values -> "")."""
    company = record.company
    market = record.market
    team = record.team_info
    scores = record.ai_scores
    return [
        record.name,
        record.description,
        record.sector,
        record.stage,
        record.country,
        record.pipeline_stage,
        record.rank,
        record.score,
        scores.llm or "",
        scores.ml or "",
        scores.xg_boost or "",
        scores.light_gbm or "",
        company.website or "",
        company.linkedin or "",
        company.founded or "",
        company.headquarters or "",
        company.employee_count or "",
        company.funding_raised or "",
        market.industry or "",
        market.sub_industry or "",
        market.market_size or "",
        market.b2b_or_b2c or "",
        market.target_persona or "",
        record.product.problem_solved or "",
        record.product.moat or "",
        record.business_model.revenue_model or "",
        record.business_model.pricing_strategy or "",
        record.business_model.unit_economics or "",
        record.sales.sales_motion or "",
        record.sales.gtm_strategy or "",
        team.key_team_members or "",
        team.founders_education or "",
        team.founders_prior_experience or "",
        record.competitive.competitors or "",
        record.risk.regulatory_risk or "",
        record.opportunity.exit_potential or "",
    ]


def serialize_records(records: Sequence[NormalizedRecord]) -> str:
    """Render records as CSV text with the fixed EXPORT_COLUMNS header.

    Returns NO_DATA_SENTINEL (not an exception) for an empty sequence.
    """
    if not records:
        return NO_DATA_SENTINEL
    lines = [",".join(escape_field(h) for h in EXPORT_COLUMNS)]
    for record in records:
        lines.append(",".join(escape_field(v) for v in record_to_row(record)))
    return "\n".join(lines)

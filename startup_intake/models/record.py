from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

"""NormalizedRecord model and its nested attribute groups.

A NormalizedRecord is the domain entity produced by the record builder from one
CSV data row. Identity fields are flat; everything else lives in independent
attribute groups whose leaves are individually optional (None = absent).

Invariant: a record is only ever constructed when ``name`` and ``sector`` are
non-empty. The builder enforces this; the dataclass itself does not.
"""

__all__ = [
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
    "NormalizedRecord",
    "DEFAULT_PIPELINE_STAGE",
]

DEFAULT_PIPELINE_STAGE = "Screening"


def _leaves(group: Any) -> dict[str, Any]:
    # None 値は出力しない (欠損は "absent" として扱う)
    return {f.name: getattr(group, f.name) for f in fields(group) if getattr(group, f.name) is not None}


@dataclass(frozen=True)
class CompanyInfo:
    website: str | None = None
    urls: str | None = None
    linkedin: str | None = None
    headquarters: str | None = None
    founded: str | None = None
    founders: str | None = None  # free text, mined by founder_extractor
    employee_count: float | None = None
    funding_raised: str | None = None
    area: str | None = None
    venture_capital_firm: str | None = None
    location: str | None = None
    investment_date: str | None = None


@dataclass(frozen=True)
class MarketInfo:
    industry: str | None = None
    sub_industry: str | None = None
    market_size: str | None = None
    ai_disruption_propensity: str | None = None
    target_persona: str | None = None
    b2b_or_b2c: str | None = None
    market_competition_analysis: str | None = None


@dataclass(frozen=True)
class ProductInfo:
    product_name: str | None = None
    problem_solved: str | None = None
    horizontal_or_vertical: str | None = None
    moat: str | None = None


@dataclass(frozen=True)
class BusinessModelInfo:
    revenue_model: str | None = None
    pricing_strategy: str | None = None
    unit_economics: str | None = None


@dataclass(frozen=True)
class SalesInfo:
    sales_motion: str | None = None
    sales_cycle_length: str | None = None
    gtm_strategy: str | None = None
    channels: str | None = None
    sales_complexity: str | None = None


@dataclass(frozen=True)
class TeamInfo:
    key_team_members: str | None = None
    team_depth: str | None = None
    founders_education: str | None = None
    founders_prior_experience: str | None = None
    team_execution_assessment: str | None = None


@dataclass(frozen=True)
class CompetitiveInfo:
    competitors: str | None = None
    industry_multiples: str | None = None


@dataclass(frozen=True)
class RiskInfo:
    regulatory_risk: str | None = None


@dataclass(frozen=True)
class OpportunityInfo:
    exit_potential: str | None = None


@dataclass(frozen=True)
class DetailedMetrics:
    arr: str | None = None
    growth: str | None = None
    team_size: float | None = None
    funding_stage: str | None = None


@dataclass(frozen=True)
class AiScores:
    """Model scores carried alongside the record.

    ``llm`` mirrors the resolved record score; ``ml`` defaults to 0 when the
    column is absent, the tree-model scores stay None.
    """
    llm: float = 0.0
    ml: float = 0.0
    xg_boost: float | None = None
    light_gbm: float | None = None


@dataclass(frozen=True)
class Rationale:
    key_strengths: str | None = None
    areas_of_concern: str | None = None


_GROUP_NAMES = (
    "company",
    "market",
    "product",
    "business_model",
    "sales",
    "team_info",
    "competitive",
    "risk",
    "opportunity",
    "detailed_metrics",
    "ai_scores",
    "rationale",
)


@dataclass(frozen=True)
class NormalizedRecord:
    """One startup row after mapping, coercion and validation."""
    id: str
    name: str
    sector: str
    stage: str = ""
    country: str = ""
    description: str = ""
    score: float = 0.0
    team: str = ""
    metrics: str = ""
    rank: float | None = None
    pipeline_stage: str = DEFAULT_PIPELINE_STAGE
    arconic_llm_rules: str | None = None
    investment_score_overview: str | None = None

    company: CompanyInfo = field(default_factory=CompanyInfo)
    market: MarketInfo = field(default_factory=MarketInfo)
    product: ProductInfo = field(default_factory=ProductInfo)
    business_model: BusinessModelInfo = field(default_factory=BusinessModelInfo)
    sales: SalesInfo = field(default_factory=SalesInfo)
    team_info: TeamInfo = field(default_factory=TeamInfo)
    competitive: CompetitiveInfo = field(default_factory=CompetitiveInfo)
    risk: RiskInfo = field(default_factory=RiskInfo)
    opportunity: OpportunityInfo = field(default_factory=OpportunityInfo)
    detailed_metrics: DetailedMetrics = field(default_factory=DetailedMetrics)
    ai_scores: AiScores = field(default_factory=AiScores)
    rationale: Rationale = field(default_factory=Rationale)
    custom_data: dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Plain dict view for JSON output; absent leaves are omitted.

        Groups are always present (possibly empty) so downstream consumers can
        index ``record["company"]`` without a guard.
        """
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in _GROUP_NAMES:
                out[f.name] = _leaves(value)
            elif f.name == "custom_data":
                if value:
                    out[f.name] = dict(value)
            elif value is not None:
                out[f.name] = value
        return out

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import jsonschema
from jsonschema.exceptions import ValidationError

"""Column mapping: heuristic suggestion and explicit override.

suggest_mapping() resolves each source header against MAPPING_RULES, an ordered
table of (canonical field, predicate) pairs evaluated top to bottom. The first
rule whose predicate matches the lower-cased header wins and no later rule is
tested for that header. Rule order is therefore part of the behaviour:
"Founders' Education" maps to ``founders`` because the broad ``founder`` rule
precedes the team rules, and "Industry Multiples" maps to ``sector`` because
the ``industry`` rule precedes the competitive rules.

When several headers match the same field, the later header replaces the
earlier one, except for rules flagged ``only_if_unmapped`` (generic score
columns never displace a score column already found).

An explicit mapping supplied by the caller replaces the heuristics entirely;
it is validated but never merged with suggestions.
"""

__all__ = [
    "MappingError",
    "MappingRule",
    "MAPPING_RULES",
    "CANONICAL_FIELDS",
    "suggest_mapping",
    "resolve_mapping",
    "validate_mapping",
    "unmapped_headers",
]

logger = logging.getLogger(__name__)


class MappingError(Exception):
    """Raised when an explicit column mapping is malformed."""


Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class MappingRule:
    field: str
    matches: Predicate
    only_if_unmapped: bool = False


def _equals(*values: str) -> Predicate:
    return lambda h: h in values


def _contains(*parts: str) -> Predicate:
    return lambda h: any(p in h for p in parts)


def _either(*predicates: Predicate) -> Predicate:
    return lambda h: any(p(h) for p in predicates)


def _all_of(*parts: str) -> Predicate:
    return lambda h: all(p in h for p in parts)


MAPPING_RULES: tuple[MappingRule, ...] = (
    # Core fields
    MappingRule("name", _either(_equals("company"), _contains("company name"))),
    MappingRule("description", _contains("description")),
    MappingRule("country", _equals("country")),
    MappingRule("website", _either(_equals("website", "domain"), _contains("website"))),
    MappingRule("urls", _equals("urls")),
    MappingRule("investment_date", _contains("investment date")),
    MappingRule("status", _equals("status")),
    # Company info
    MappingRule("linkedin_url", _contains("linkedin")),
    MappingRule("location", _either(_equals("address"), _contains("location"))),
    MappingRule("employee_size", _either(_equals("size"), _contains("employee size"))),
    MappingRule("num_employees", _equals("employees", "# employees", "num employees")),
    MappingRule("area", _equals("area")),
    MappingRule("venture_capital_firm", _either(_equals("venture capital firm"), _contains("vc firm"))),
    MappingRule("founding_year", _either(_equals("founding year"), _contains("founded"))),
    MappingRule("founders", _contains("founder")),
    # Team info
    MappingRule("founders_education", _either(_equals("founders' education"), _contains("founders education"))),
    MappingRule(
        "founders_prior_experience",
        _either(_equals("founders' prior experience"), _contains("founders prior experience")),
    ),
    MappingRule("key_team_members", _contains("key team")),
    MappingRule("team_depth", _contains("team depth")),
    # Market info
    MappingRule("b2b_or_b2c", _contains("b2b", "b2c")),
    MappingRule("sub_industry", _either(_equals("sub-industry"), _contains("sub industry"))),
    MappingRule("market_size", _contains("market size")),
    MappingRule("ai_disruption_propensity", _contains("ai disruption")),
    MappingRule("sector", _contains("industry")),
    MappingRule("target_persona", _contains("target persona")),
    # Sales info
    MappingRule("sales_motion", _contains("sales motion")),
    MappingRule("sales_cycle_length", _contains("sales cycle")),
    MappingRule("gtm_strategy", _either(_equals("go-to-market strategy"), _contains("gtm", "go to market"))),
    MappingRule("channels", _contains("channel")),
    MappingRule("sales_complexity", _contains("sales complexity")),
    # Product info
    MappingRule("product_name", _contains("product name")),
    MappingRule("problem_solved", _contains("problem solved")),
    MappingRule("horizontal_or_vertical", _contains("horizontal", "vertical")),
    MappingRule("moat", _contains("moat")),
    # Business model
    MappingRule("revenue_model", _contains("revenue model")),
    MappingRule("pricing_strategy", _contains("pricing")),
    MappingRule("unit_economics", _contains("unit economics")),
    # Competitive info
    MappingRule("competitors", _contains("competitor")),
    MappingRule("industry_multiples", _contains("industry multiple")),
    # Risk & opportunity
    MappingRule("regulatory_risk", _contains("regulatory")),
    MappingRule("exit_potential", _contains("exit")),
    # AI scores & analysis
    MappingRule("machine_learning_score", _equals("machine learning score", "ml score", "ml_score")),
    MappingRule("xg_boost", _equals("xg boost", "xgboost")),
    MappingRule("light_gbm", _contains("lightgbm")),
    MappingRule("arconic_llm_rules", _contains("llm rules")),
    MappingRule("investment_score_overview", _contains("investment score")),
    MappingRule("key_strengths", _contains("strengths")),
    MappingRule("areas_of_concern", _contains("concern")),
    MappingRule(
        "market_competition_analysis",
        _either(_equals("market & competition analysis"), _all_of("market", "competition")),
    ),
    MappingRule(
        "team_execution_assessment",
        _either(_equals("team & execution assessment"), _all_of("team", "execution")),
    ),
    # Legacy fields
    MappingRule("sector", _contains("sector")),
    MappingRule("stage", _contains("stage", "round")),
    MappingRule("score", _either(_equals("llm_score", "llm score"), _all_of("llm", "score"))),
    MappingRule(
        "score",
        lambda h: ("score" in h or "rating" in h) and "machine learning" not in h and "ml" not in h,
        only_if_unmapped=True,
    ),
)

# Fields the record builder reads but no heuristic rule produces; reachable
# through an explicit mapping only.
_EXPLICIT_ONLY_FIELDS = (
    "headquarters",
    "linkedin",
    "founded",
    "employee_count",
    "funding_raised",
    "industry",
    "team",
    "metrics",
    "rank",
    "arr",
    "growth",
    "team_size",
    "funding_stage",
)

CANONICAL_FIELDS: frozenset[str] = frozenset(
    [r.field for r in MAPPING_RULES] + list(_EXPLICIT_ONLY_FIELDS)
)

_MAPPING_SCHEMA = {
    "type": "object",
    "propertyNames": {"enum": sorted(CANONICAL_FIELDS)},
    "additionalProperties": {"type": "string"},
}


def _match_rule(header: str, mapping: Mapping[str, str]) -> MappingRule | None:
    for rule in MAPPING_RULES:
        if rule.only_if_unmapped and rule.field in mapping:
            continue
        if rule.matches(header):
            return rule
    return None


def suggest_mapping(headers: Iterable[str]) -> dict[str, str]:
    """Best-guess canonical field -> source header mapping.

    Pure function of ``headers``; never raises. Headers that match no rule
    are simply absent from the result.
    """
    mapping: dict[str, str] = {}
    for original in headers:
        rule = _match_rule(original.lower(), mapping)
        if rule is None:
            continue
        mapping[rule.field] = original
    logger.debug(f"suggested mapping: {mapping}")
    return mapping


def validate_mapping(mapping: Mapping[str, str]) -> None:
    """Validate an explicit mapping (canonical field names -> header strings).

    Raises:
        MappingError: unknown canonical field or non-string header
    """
    try:
        jsonschema.validate(dict(mapping), _MAPPING_SCHEMA)
    except ValidationError as e:
        raise MappingError(f"invalid column mapping: {e.message}") from e


def resolve_mapping(
    headers: Iterable[str], explicit: Mapping[str, str] | None = None
) -> Mapping[str, str]:
    """Return the mapping to ingest with, as a read-only view.

    ``explicit`` (if given) replaces the heuristics; it is not merged.
    """
    if explicit is not None:
        validate_mapping(explicit)
        logger.debug("explicit column mapping supplied; heuristics bypassed")
        return MappingProxyType(dict(explicit))
    return MappingProxyType(suggest_mapping(headers))


def unmapped_headers(headers: Iterable[str], mapping: Mapping[str, str]) -> list[str]:
    """Headers (in input order) not referenced by any mapping entry."""
    used = set(mapping.values())
    return [h for h in headers if h and h not in used]

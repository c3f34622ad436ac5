from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.founder import FounderEntity
from ..models.record import NormalizedRecord

"""Founder entity extraction from a record's free-text founders field.

Two grammars are recognised:

- structured: "Jane Doe: Ex-Google PM; John Smith: Stanford MBA"
  (chosen when the text contains both ';' and ':')
- simple: "Jane Doe, John Smith", "Jane Doe & John Smith", "Jane and John"

Founder ids are ``"{record_id}-founder-{ordinal}"``. They follow extraction
order, so re-parsing edited text can renumber founders.
"""

__all__ = [
    "parse_founder_names",
    "extract_founders",
    "extract_founders_from_records",
]

_SIMPLE_SEPARATORS = re.compile(r"[,&]|\band\b", re.IGNORECASE)


def _parse_structured(text: str) -> list[tuple[str, str | None]]:
    parsed: list[tuple[str, str | None]] = []
    for entry in (e.strip() for e in text.split(";")):
        if not entry:
            continue
        colon = entry.find(":")
        if colon > 0:
            name = entry[:colon].strip()
            background = entry[colon + 1 :].strip()
            if name:
                parsed.append((name, background or None))
        else:
            parsed.append((entry, None))
    return parsed


def _parse_simple(text: str) -> list[tuple[str, str | None]]:
    names = (piece.strip() for piece in _SIMPLE_SEPARATORS.split(text))
    return [(name, None) for name in names if name and name.lower() != "and"]


def parse_founder_names(text: str | None) -> list[tuple[str, str | None]]:
    """(name, background) pairs in extraction order; [] for blank input."""
    if not text or not text.strip():
        return []
    if ";" in text and ":" in text:
        return _parse_structured(text)
    return _parse_simple(text)


def extract_founders(record: NormalizedRecord) -> list[FounderEntity]:
    """Founders of one record, carrying inherited team and company context."""
    parsed = parse_founder_names(record.company.founders)
    team = record.team_info
    return [
        FounderEntity(
            id=f"{record.id}-founder-{ordinal}",
            name=name,
            background=background,
            company_id=record.id,
            company_name=record.name,
            company_sector=record.sector,
            company_rank=record.rank,
            education=team.founders_education,
            prior_experience=background or team.founders_prior_experience,
            linkedin=record.company.linkedin,
            company_website=record.company.website,
            company_description=record.description or None,
            company_country=record.country or None,
            pipeline_stage=record.pipeline_stage,
        )
        for ordinal, (name, background) in enumerate(parsed)
    ]


def extract_founders_from_records(records: Iterable[NormalizedRecord]) -> list[FounderEntity]:
    # レコード間の状態は持たない (重複排除もしない)
    return [founder for record in records for founder in extract_founders(record)]

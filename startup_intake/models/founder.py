from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

"""Founder models.

FounderEntity is derived from a NormalizedRecord's free-text founders field.
It only holds a back-reference (``company_id``) plus display fields copied by
value, never the record itself. Ids are ordinal based and therefore change when
the source text is edited and re-parsed.

RosterFounder is one row of a founder-centric roster CSV (a separate import
schema, see services.founder_roster).
"""

__all__ = [
    "FounderEntity",
    "RosterFounder",
]


@dataclass(frozen=True)
class FounderEntity:
    id: str  # "{record_id}-founder-{ordinal}"
    name: str
    company_id: str
    company_name: str
    company_sector: str
    background: str | None = None
    role: str = "Founder"
    company_rank: float | None = None
    education: str | None = None
    prior_experience: str | None = None
    linkedin: str | None = None
    company_website: str | None = None
    company_description: str | None = None
    company_country: str | None = None
    pipeline_stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RosterFounder:
    name: str
    email: str | None = None
    linkedin: str | None = None
    title: str | None = None
    education: str | None = None
    experience: str | None = None
    bio: str | None = None
    location: str | None = None
    twitter: str | None = None
    github: str | None = None
    website: str | None = None
    skills: tuple[str, ...] = ()
    company_name: str | None = None  # used for auto-linking to a company record
    role: str | None = None

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["skills"] = list(self.skills)
        return data

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from ..models.founder import RosterFounder
from ..parsing.reader import tokenize

"""Founder roster import: a founder-centric CSV schema (one founder per row).

Unlike the startup column mapper (which walks headers and picks the first
matching rule), the roster mapper walks target fields and picks, for each, the
first header matching that field's patterns. A header can therefore feed more
than one field; exclusions keep the obvious collisions apart ("Company Name"
never becomes the founder name, "LinkedIn URL" never becomes the website).
"""

__all__ = [
    "ROSTER_FIELDS",
    "ROSTER_TEMPLATE_HEADERS",
    "suggest_founder_mapping",
    "parse_founder_roster",
    "roster_template",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RosterField:
    field: str
    patterns: tuple[str, ...]
    test: Callable[[str, str], bool] = lambda header, pattern: pattern in header
    exclude: tuple[str, ...] = ()


def _equals_or_contains(header: str, pattern: str) -> bool:
    return header == pattern or pattern in header


def _equals_or_prefix(header: str, pattern: str) -> bool:
    return header == pattern or header.startswith(pattern)


ROSTER_FIELDS: tuple[_RosterField, ...] = (
    _RosterField("name", ("name", "founder", "full name", "founder name", "person"), exclude=("company",)),
    _RosterField("email", ("email", "e-mail", "mail")),
    _RosterField("linkedin", ("linkedin", "linked in", "linkedin url", "linkedin profile")),
    _RosterField("title", ("title", "job title", "position", "designation"), _equals_or_contains),
    _RosterField("education", ("education", "degree", "school", "university", "college")),
    _RosterField("experience", ("experience", "prior experience", "background", "work history", "previous")),
    _RosterField("bio", ("bio", "about", "summary", "description"), _equals_or_contains),
    _RosterField("location", ("location", "city", "country", "address", "based in")),
    _RosterField("twitter", ("twitter", "x.com", "twitter url")),
    _RosterField("github", ("github", "git hub")),
    _RosterField(
        "website",
        ("website", "personal website", "personal site", "url", "web"),
        _equals_or_prefix,
        exclude=("linkedin",),
    ),
    _RosterField("skills", ("skills", "expertise", "specialties", "tags")),
    _RosterField("company_name", ("company", "company name", "startup", "organization", "firm")),
    _RosterField("role", ("role", "role at company", "founder type", "position type"), exclude=("revenue",)),
)

ROSTER_TEMPLATE_HEADERS = (
    "Name",
    "Email",
    "LinkedIn URL",
    "Title",
    "Education",
    "Experience",
    "Bio",
    "Location",
    "Skills",
    "Company Name",
    "Role",
    "Twitter",
    "GitHub",
    "Website",
)

_TEMPLATE_SAMPLE = (
    "John Smith",
    "john@example.com",
    "https://linkedin.com/in/johnsmith",
    "CEO",
    "Stanford MBA 2015",
    "Ex-Google PM, 5 years",
    "Serial entrepreneur with 2 exits",
    "San Francisco, CA",
    "AI, Product Management, Strategy",
    "TechCorp Inc",
    "Co-Founder",
    "https://twitter.com/johnsmith",
    "https://github.com/johnsmith",
    "https://johnsmith.com",
)


def suggest_founder_mapping(headers: Iterable[str]) -> dict[str, str]:
    """Roster field -> header, first matching header per field."""
    headers = list(headers)
    normalized = [h.lower().strip() for h in headers]
    mapping: dict[str, str] = {}
    for target in ROSTER_FIELDS:
        for original, h in zip(headers, normalized):
            if any(x in h for x in target.exclude):
                continue
            if any(target.test(h, p) for p in target.patterns):
                mapping[target.field] = original
                break
    return mapping


def parse_founder_roster(text: str, mapping: Mapping[str, str]) -> list[RosterFounder]:
    """Parse roster rows; rows without a name are skipped."""
    rows = tokenize(text)
    if not rows:
        return []
    header_index = {h: i for i, h in enumerate(rows[0])}

    def cell(row: list[str], field: str) -> str | None:
        header = mapping.get(field)
        idx = header_index.get(header) if header else None
        if idx is None or idx >= len(row):
            return None
        return row[idx].strip() or None

    founders: list[RosterFounder] = []
    for row_number, row in enumerate(rows[1:], start=1):
        name = cell(row, "name")
        if name is None:
            logger.debug(f"roster row {row_number}: no name, skipped")
            continue
        skills_raw = cell(row, "skills")
        skills = tuple(s.strip() for s in re.split(r"[,;]", skills_raw) if s.strip()) if skills_raw else ()
        founders.append(
            RosterFounder(
                name=name,
                email=cell(row, "email"),
                linkedin=cell(row, "linkedin"),
                title=cell(row, "title"),
                education=cell(row, "education"),
                experience=cell(row, "experience"),
                bio=cell(row, "bio"),
                location=cell(row, "location"),
                twitter=cell(row, "twitter"),
                github=cell(row, "github"),
                website=cell(row, "website"),
                skills=skills,
                company_name=cell(row, "company_name"),
                role=cell(row, "role"),
            )
        )
    return founders


def roster_template() -> str:
    """Downloadable template: header line + one fully quoted sample row."""
    return "\n".join(
        [
            ",".join(ROSTER_TEMPLATE_HEADERS),
            ",".join(f'"{v}"' for v in _TEMPLATE_SAMPLE),
        ]
    )

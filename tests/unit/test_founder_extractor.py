from __future__ import annotations
from startup_intake.models.record import CompanyInfo, NormalizedRecord, TeamInfo
from startup_intake.services.founder_extractor import (
    extract_founders,
    extract_founders_from_records,
    parse_founder_names,
)


def _record(founders: str | None, **kwargs) -> NormalizedRecord:
    return NormalizedRecord(
        id=kwargs.pop("id", "startup-1"),
        name="Acme",
        sector="Robotics",
        country="USA",
        description="Warehouse robots",
        rank=3,
        company=CompanyInfo(founders=founders, website="https://acme.io", linkedin="https://linkedin.com/company/acme"),
        team_info=TeamInfo(founders_education="MIT", founders_prior_experience="Amazon Robotics"),
        **kwargs,
    )


def test_structured_grammar_with_backgrounds():
    founders = extract_founders(_record("Jane Doe: Ex-Google PM; John Smith: Stanford MBA"))
    assert [(f.name, f.background) for f in founders] == [
        ("Jane Doe", "Ex-Google PM"),
        ("John Smith", "Stanford MBA"),
    ]
    assert founders[0].prior_experience == "Ex-Google PM"
    assert founders[0].education == "MIT"


def test_simple_grammar_inherits_team_context():
    founders = extract_founders(_record("Jane Doe, John Smith"))
    assert [f.name for f in founders] == ["Jane Doe", "John Smith"]
    for f in founders:
        assert f.background is None
        assert f.education == "MIT"
        assert f.prior_experience == "Amazon Robotics"


def test_structured_grammar_splits_at_first_colon_only():
    assert parse_founder_names("Jane: CTO: ex-Meta; Bob: PhD") == [("Jane", "CTO: ex-Meta"), ("Bob", "PhD")]


def test_structured_entry_without_colon_is_bare_name():
    assert parse_founder_names("Jane: CTO; Bob;  ; ") == [("Jane", "CTO"), ("Bob", None)]


def test_structured_entry_with_empty_background():
    assert parse_founder_names("Jane:; Bob: PhD") == [("Jane", None), ("Bob", "PhD")]


def test_semicolons_without_colon_use_simple_grammar():
    # ';' だけでは structured にならない
    assert parse_founder_names("Jane; Bob") == [("Jane; Bob", None)]


def test_simple_grammar_separators():
    assert [n for n, _ in parse_founder_names("Jane & Bob and Alice AND Carol, Dan")] == [
        "Jane",
        "Bob",
        "Alice",
        "Carol",
        "Dan",
    ]


def test_and_inside_a_name_is_not_a_separator():
    assert [n for n, _ in parse_founder_names("Alexandra Anderson, Randall Sand")] == [
        "Alexandra Anderson",
        "Randall Sand",
    ]


def test_blank_or_absent_founders():
    assert extract_founders(_record(None)) == []
    assert extract_founders(_record("   ")) == []
    assert parse_founder_names(", & ,") == []


def test_ids_and_denormalized_company_fields():
    founders = extract_founders(_record("Jane, Bob", id="startup-9"))
    assert [f.id for f in founders] == ["startup-9-founder-0", "startup-9-founder-1"]
    f = founders[0]
    assert f.company_id == "startup-9"
    assert f.company_name == "Acme"
    assert f.company_sector == "Robotics"
    assert f.company_rank == 3
    assert f.company_website == "https://acme.io"
    assert f.linkedin == "https://linkedin.com/company/acme"
    assert f.company_description == "Warehouse robots"
    assert f.company_country == "USA"
    assert f.pipeline_stage == "Screening"
    assert f.role == "Founder"


def test_ids_follow_order_not_identity():
    """Known limitation: ids are ordinal, reordering renumbers founders."""
    first = extract_founders(_record("Jane, Bob"))
    second = extract_founders(_record("Bob, Jane"))
    assert first[0].id == second[0].id
    assert first[0].name != second[0].name


def test_batch_extraction_flattens_without_dedup():
    records = [_record("Jane, Bob", id="a"), _record(None, id="b"), _record("Jane", id="c")]
    founders = extract_founders_from_records(records)
    assert [f.id for f in founders] == ["a-founder-0", "a-founder-1", "c-founder-0"]
    assert [f.name for f in founders].count("Jane") == 2

"""Tests for turning CSV rows into prospect records"""
import pytest
from pydantic import ValidationError

from src.prospect_tool.exceptions import MissingActorError
from src.prospect_tool.schemas.prospect import CompanyProspect, PersonProspect
from src.prospect_tool.services.field_mapper import TargetField
from src.prospect_tool.services.prospect_transform import record_warnings, split_tags, transform_rows

MAPPING = {
    "company_name": "Company",
    "company_domain": "Website",
    "contact_name": "Name",
    "contact_email": "Email",
    "tags": "Tags",
}


def _row(**values):
    row = {"Company": "", "Website": "", "Name": "", "Email": "", "Tags": ""}
    row.update(values)
    return row


def test_split_tags_trims_and_drops_empty_pieces():
    assert split_tags("a, b ,,c") == ["a", "b", "c"]


def test_defaults_and_copied_values():
    records = transform_rows([_row(Company="Acme", Website="acme.com", Tags="a, b ,,c")], MAPPING, actor_id=7)

    record = records[0]
    assert isinstance(record, CompanyProspect)
    assert record.created_by == 7
    assert record.status == "new"
    assert record.prospect_type == "company"
    assert record.company_domain == "acme.com"
    assert record.tags == ["a", "b", "c"]
    assert record.contact_email is None


def test_contact_without_company_is_a_person():
    record = transform_rows([_row(Name="Dana Reyes", Email="dana@acme.com")], MAPPING, actor_id=1)[0]

    assert isinstance(record, PersonProspect)
    assert record.prospect_type == "person"


def test_company_wins_over_contact_fields():
    record = transform_rows([_row(Company="Acme", Name="Dana Reyes")], MAPPING, actor_id=1)[0]

    assert record.prospect_type == "company"


def test_row_without_names_defaults_to_company():
    record = transform_rows([_row(Email="info@acme.com")], MAPPING, actor_id=1)[0]

    assert record.prospect_type == "company"


def test_empty_tag_cell_sets_no_tags():
    record = transform_rows([_row(Company="Acme", Tags=" , ,")], MAPPING, actor_id=1)[0]

    assert record.tags is None


def test_output_order_matches_input_and_is_repeatable():
    rows = [_row(Company=f"Company {i}") for i in range(5)]

    first = transform_rows(rows, MAPPING, actor_id=1)
    second = transform_rows(rows, MAPPING, actor_id=1)

    assert [r.company_name for r in first] == [f"Company {i}" for i in range(5)]
    assert first == second


def test_fields_outside_the_registry_are_ignored():
    fields = (TargetField("company_name", "Company Name"),)

    record = transform_rows([_row(Company="Acme", Email="x@acme.com")], MAPPING, actor_id=1, fields=fields)[0]

    assert record.company_name == "Acme"
    assert record.contact_email is None


def test_missing_actor_is_rejected():
    with pytest.raises(MissingActorError):
        transform_rows([_row(Company="Acme")], MAPPING, actor_id=None)


def test_person_prospect_cannot_have_company():
    with pytest.raises(ValidationError):
        PersonProspect(created_by=1, contact_name="Dana", company_name="Acme")


def test_record_warnings():
    record = transform_rows([_row(Email="not-an-email")], MAPPING, actor_id=1)[0]

    warnings = record_warnings(record)

    assert any(w.startswith("invalid email format") for w in warnings)
    assert "neither company_name nor contact_name is set" in warnings


def test_to_row_omits_unset_fields():
    record = transform_rows([_row(Company="Acme")], MAPPING, actor_id=3)[0]

    assert record.to_row() == {"created_by": 3, "status": "new", "company_name": "Acme", "prospect_type": "company"}

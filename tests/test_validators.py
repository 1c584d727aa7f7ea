"""Tests for the validation rule catalogue and step validation."""

import pytest

from formwizard.config.models import FieldConfig
from formwizard.wizard.fields import FileHandle
from formwizard.wizard.steps import validate_all, validate_step
from formwizard.wizard.validators import validate_field


def _rule(rule: str, kind: str = "text") -> FieldConfig:
    return FieldConfig(
        name="f",
        kind=kind,
        rule=rule,
        required_message="missing",
        invalid_message="bad",
    )


@pytest.mark.parametrize("value, expected", [
    ("", "missing"),
    ("   ", "missing"),
    ("Ada", None),
])
def test_required_string(value, expected) -> None:
    assert validate_field(_rule("required-string"), value) == expected


@pytest.mark.parametrize("value, expected", [
    ("", "missing"),
    ("ada@example", "bad"),
    ("ada example.com", "bad"),
    (" ada@example.com ", None),
])
def test_email(value, expected) -> None:
    assert validate_field(_rule("email"), value) == expected


@pytest.mark.parametrize("value, expected", [
    ("", "missing"),
    ("12345", "bad"),
    ("phone-me", "bad"),
    ("+1 555-123-4567", None),
    ("5551234", None),
])
def test_phone(value, expected) -> None:
    assert validate_field(_rule("phone"), value) == expected


def test_required_select_only_checks_empty() -> None:
    spec = _rule("required-select", kind="select")
    assert validate_field(spec, "") == "missing"
    assert validate_field(spec, "LLC") is None


def test_required_multiselect() -> None:
    spec = _rule("required-multiselect", kind="multiselect")
    assert validate_field(spec, frozenset()) == "missing"
    assert validate_field(spec, frozenset({"Asia"})) is None


def test_required_true() -> None:
    spec = _rule("required-true", kind="boolean")
    assert validate_field(spec, False) == "missing"
    assert validate_field(spec, True) is None


def test_required_files() -> None:
    single = _rule("required-file", kind="file")
    multi = _rule("required-files", kind="files")
    handle = FileHandle(name="x.pdf", size=1)

    assert validate_field(single, None) == "missing"
    assert validate_field(single, handle) is None
    assert validate_field(multi, ()) == "missing"
    assert validate_field(multi, (handle,)) is None


@pytest.mark.parametrize("value, expected", [
    ("", None),
    ("3", None),
    ("2.5", None),
    ("0", None),
    ("-1", "bad"),
    ("three", "bad"),
    ("nan", "bad"),
])
def test_numeric_optional(value, expected) -> None:
    assert validate_field(_rule("numeric-optional"), value) == expected


def test_field_without_rule_always_passes() -> None:
    assert validate_field(FieldConfig(name="notes"), "") is None


def test_buyer_step_zero_reports_missing_fields(buyer_flow) -> None:
    errors = validate_step(buyer_flow, 0, buyer_flow.defaults())
    assert errors == {"name": "Name is required.", "company": "Company is required."}


def test_step_ignores_fields_of_other_steps(buyer_flow) -> None:
    """Step 0 passes even though later required fields are empty."""
    data = {**buyer_flow.defaults(), "name": "Ada", "company": "Acme"}
    assert validate_step(buyer_flow, 0, data) == {}
    assert "email" in validate_step(buyer_flow, 1, data)


def test_error_disappears_once_populated(seller_flow) -> None:
    data = seller_flow.defaults()
    assert "location" in validate_step(seller_flow, 2, data)
    data = {**data, "location": "Berlin"}
    assert "location" not in validate_step(seller_flow, 2, data)


def test_seller_experience_is_optional_but_numeric(seller_flow) -> None:
    data = {
        **seller_flow.defaults(),
        "name": "Grace",
        "email": "grace@example.com",
        "phone": "5551234",
        "businessType": "LLC",
    }
    assert validate_step(seller_flow, 0, data) == {}
    errors = validate_step(seller_flow, 0, {**data, "yearsExperience": "-2"})
    assert errors == {"yearsExperience": "Invalid experience"}


def test_review_step_has_no_rules(buyer_flow) -> None:
    assert validate_step(buyer_flow, buyer_flow.last_index, {}) == {}


def test_out_of_range_step(buyer_flow) -> None:
    with pytest.raises(IndexError):
        validate_step(buyer_flow, 99, {})


def test_validate_all_merges_every_step(seller_flow, valid_seller_data) -> None:
    assert validate_all(seller_flow, valid_seller_data) == {}
    errors = validate_all(seller_flow, {**valid_seller_data, "name": "", "termsAccepted": False})
    assert errors == {
        "name": "Name is required",
        "termsAccepted": "You must accept terms & conditions",
    }

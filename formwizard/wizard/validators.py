"""
Step Validation

Pure validation rules for the rule catalogue. A step is validated
only against its own fields; fields on other steps are never checked.
"""

import math
import re
from typing import Any, Callable, Dict, Mapping, Optional

from ..config.models import FieldConfig, RuleKind


ErrorMap = Dict[str, str]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"\+?[\d\s\-]{7,15}")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def check_required_string(spec: FieldConfig, value: Any) -> Optional[str]:
    if not _text(value).strip():
        return spec.required_message
    return None


def check_email(spec: FieldConfig, value: Any) -> Optional[str]:
    text = _text(value).strip()
    if not text:
        return spec.required_message
    if not EMAIL_PATTERN.fullmatch(text):
        return spec.invalid_message
    return None


def check_phone(spec: FieldConfig, value: Any) -> Optional[str]:
    text = _text(value).strip()
    if not text:
        return spec.required_message
    if not PHONE_PATTERN.fullmatch(text):
        return spec.invalid_message
    return None


def check_required_select(spec: FieldConfig, value: Any) -> Optional[str]:
    if _text(value) == "":
        return spec.required_message
    return None


def check_required_multiselect(spec: FieldConfig, value: Any) -> Optional[str]:
    if not value:
        return spec.required_message
    return None


def check_required_true(spec: FieldConfig, value: Any) -> Optional[str]:
    if value is not True:
        return spec.required_message
    return None


def check_required_file(spec: FieldConfig, value: Any) -> Optional[str]:
    if value is None:
        return spec.required_message
    return None


def check_required_files(spec: FieldConfig, value: Any) -> Optional[str]:
    if not value:
        return spec.required_message
    return None


def check_numeric_optional(spec: FieldConfig, value: Any) -> Optional[str]:
    text = _text(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return spec.invalid_message
    if not math.isfinite(number) or number < 0:
        return spec.invalid_message
    return None


RULES: Dict[RuleKind, Callable[[FieldConfig, Any], Optional[str]]] = {
    RuleKind.REQUIRED_STRING: check_required_string,
    RuleKind.EMAIL: check_email,
    RuleKind.PHONE: check_phone,
    RuleKind.REQUIRED_SELECT: check_required_select,
    RuleKind.REQUIRED_MULTISELECT: check_required_multiselect,
    RuleKind.REQUIRED_TRUE: check_required_true,
    RuleKind.REQUIRED_FILE: check_required_file,
    RuleKind.REQUIRED_FILES: check_required_files,
    RuleKind.NUMERIC_OPTIONAL: check_numeric_optional,
}


def validate_field(spec: FieldConfig, value: Any) -> Optional[str]:
    """
    Validate one field value against its rule.

    Returns:
        The error message, or None when the value passes (or the
        field has no rule)
    """
    if spec.rule is None:
        return None
    return RULES[spec.rule](spec, value)


def validate_fields(fields, form_data: Mapping[str, Any]) -> ErrorMap:
    """Validate a group of fields, keyed by field name."""
    errors: ErrorMap = {}
    for spec in fields:
        message = validate_field(spec, form_data.get(spec.name))
        if message:
            errors[spec.name] = message
    return errors

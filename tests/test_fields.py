"""Tests for field coercion and the pure field mutators."""

import pytest

from formwizard.config.models import FieldConfig, FieldKind
from formwizard.wizard.errors import FieldKindError
from formwizard.wizard.fields import (
    FileHandle,
    check_kind,
    coerce,
    initial_value,
    set_field,
    toggle_option,
)


def _spec(kind: str, **kwargs) -> FieldConfig:
    return FieldConfig(name="f", kind=kind, **kwargs)


def test_text_keeps_raw_string() -> None:
    """Text input is stored as given, including surrounding spaces."""
    assert coerce(_spec("text"), "  Ada ") == "  Ada "
    assert coerce(_spec("text"), None) == ""
    assert coerce(_spec("text"), 42) == "42"


def test_text_rejects_collections() -> None:
    with pytest.raises(FieldKindError):
        coerce(_spec("text"), ["a"])


def test_boolean_uses_checked_state() -> None:
    spec = _spec("boolean")
    assert coerce(spec, True) is True
    assert coerce(spec, False) is False
    assert coerce(spec, None) is False


@pytest.mark.parametrize("raw", ["false", "true", 1, 0, []])
def test_boolean_rejects_non_bool(raw) -> None:
    """A serialized "false" must not tick the box."""
    with pytest.raises(FieldKindError):
        coerce(_spec("boolean"), raw)


def test_single_file_keeps_first_or_none() -> None:
    """A single-file field keeps the first picked file, or None for an empty pick."""
    a = FileHandle(name="a.pdf", size=10)
    b = FileHandle(name="b.pdf", size=20)
    spec = _spec("file")
    assert coerce(spec, [a, b]) == a
    assert coerce(spec, []) is None
    assert coerce(spec, a) == a


def test_multi_file_becomes_tuple() -> None:
    a = FileHandle(name="a.png", size=1)
    spec = _spec("files")
    assert coerce(spec, [a]) == (a,)
    assert coerce(spec, None) == ()


def test_file_fields_reject_non_handles() -> None:
    with pytest.raises(FieldKindError):
        coerce(_spec("files"), ["not-a-handle"])


def test_multiselect_rejects_bare_string() -> None:
    with pytest.raises(FieldKindError):
        coerce(_spec("multiselect"), "Europe")


def test_set_field_returns_new_snapshot() -> None:
    """The input snapshot is left untouched."""
    original = {"f": ""}
    updated = set_field(original, _spec("text"), "x")
    assert updated == {"f": "x"}
    assert original == {"f": ""}


def test_toggle_twice_restores_original_set() -> None:
    spec = _spec("multiselect", options=["Asia", "Europe"])
    start = {"f": frozenset({"Asia", "Europe"})}

    once = toggle_option(start, spec, "Asia")
    assert once["f"] == frozenset({"Europe"})
    twice = toggle_option(once, spec, "Asia")
    assert twice["f"] == start["f"]


def test_toggle_on_non_multiselect_fails() -> None:
    with pytest.raises(FieldKindError):
        toggle_option({"f": ""}, _spec("text"), "x")


def test_check_kind_rejects_mismatch() -> None:
    check_kind(_spec("boolean"), FieldKind.BOOLEAN)
    check_kind(_spec("boolean"), None)
    with pytest.raises(FieldKindError):
        check_kind(_spec("boolean"), FieldKind.TEXT)


def test_initial_values_per_kind() -> None:
    assert initial_value(_spec("text")) == ""
    assert initial_value(_spec("boolean")) is False
    assert initial_value(_spec("multiselect", default=["A"])) == frozenset({"A"})
    assert initial_value(_spec("file")) is None
    assert initial_value(_spec("files")) == ()


def test_file_handle_from_path_records_metadata(tmp_path) -> None:
    path = tmp_path / "license.pdf"
    path.write_bytes(b"x" * 2048)
    handle = FileHandle.from_path(path)
    assert handle.name == "license.pdf"
    assert handle.size == 2048

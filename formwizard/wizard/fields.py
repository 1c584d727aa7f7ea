"""
Field Mutation

Pure functions that apply a single field edit to a form-data snapshot.
Every function returns a new mapping; the input snapshot is never
modified.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from ..config.models import FieldConfig, FieldKind
from .errors import FieldKindError


FormData = Dict[str, Any]


@dataclass(frozen=True)
class FileHandle:
    """
    Opaque reference to a host-owned file.

    Only metadata is recorded. The wizard never reads from
    `read_handle` and never persists file handles.
    """
    name: str
    size: int = 0
    read_handle: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileHandle":
        """Describe a local file by name and size."""
        path = Path(path).expanduser()
        return cls(name=path.name, size=os.stat(path).st_size, read_handle=path)


@dataclass(frozen=True)
class FieldChange:
    """A field-change event emitted by the host UI."""
    field_name: str
    raw_value: Any
    value_kind: Optional[FieldKind] = None


def initial_value(spec: FieldConfig) -> Any:
    """Get the starting value for a field from its declared default."""
    if spec.kind == FieldKind.MULTISELECT:
        return frozenset(spec.default or ())
    if spec.kind == FieldKind.FILE:
        return None
    if spec.kind == FieldKind.FILES:
        return ()
    return spec.default


def check_kind(spec: FieldConfig, kind: Optional[FieldKind]) -> None:
    """Reject a change whose declared kind differs from the field's kind."""
    if kind is not None and FieldKind(kind) != spec.kind:
        raise FieldKindError(
            f"Field '{spec.name}' is {spec.kind.value}, got a {FieldKind(kind).value} change"
        )


def _file(value: Any, spec: FieldConfig) -> FileHandle:
    if not isinstance(value, FileHandle):
        raise FieldKindError(f"Field '{spec.name}' expects file handles, got {type(value).__name__}")
    return value


def coerce(spec: FieldConfig, raw: Any) -> Any:
    """
    Convert raw host input into the value variant of the field's kind.

    Args:
        spec: Field configuration
        raw: Value as delivered by the host

    Returns:
        str for text/select, bool for boolean, frozenset for
        multiselect, FileHandle or None for file, tuple of FileHandle
        for files

    Raises:
        FieldKindError: If the raw value cannot represent the kind
    """
    kind = spec.kind

    if kind in (FieldKind.TEXT, FieldKind.SELECT):
        if raw is None:
            return ""
        if isinstance(raw, (bool, set, frozenset, list, tuple, dict, FileHandle)):
            raise FieldKindError(f"Field '{spec.name}' expects a string")
        return str(raw)

    if kind == FieldKind.BOOLEAN:
        if raw is None:
            return False
        if not isinstance(raw, bool):
            raise FieldKindError(f"Field '{spec.name}' expects true or false")
        return raw

    if kind == FieldKind.MULTISELECT:
        if raw is None:
            return frozenset()
        if isinstance(raw, str) or not isinstance(raw, Iterable):
            raise FieldKindError(f"Field '{spec.name}' expects a collection of options")
        return frozenset(str(option) for option in raw)

    if kind == FieldKind.FILE:
        if raw is None:
            return None
        if isinstance(raw, FileHandle):
            return raw
        if not isinstance(raw, Iterable):
            raise FieldKindError(f"Field '{spec.name}' expects a file handle")
        # A file picker hands over a list; keep the first file
        items = list(raw)
        return _file(items[0], spec) if items else None

    # FieldKind.FILES
    if raw is None:
        return ()
    if isinstance(raw, FileHandle):
        return (raw,)
    if not isinstance(raw, Iterable):
        raise FieldKindError(f"Field '{spec.name}' expects a list of file handles")
    return tuple(_file(item, spec) for item in raw)


def set_field(form_data: Mapping[str, Any], spec: FieldConfig, raw: Any) -> FormData:
    """Return a new snapshot with one field replaced by its coerced value."""
    return {**form_data, spec.name: coerce(spec, raw)}


def toggle_option(form_data: Mapping[str, Any], spec: FieldConfig, option: str) -> FormData:
    """
    Return a new snapshot with `option` toggled in a multiselect field.

    The option is added when absent and removed when present, so two
    toggles of the same option give back the original set.
    """
    if spec.kind != FieldKind.MULTISELECT:
        raise FieldKindError(f"Field '{spec.name}' is not a multiselect field")

    current = frozenset(form_data.get(spec.name) or ())
    if option in current:
        updated = current - {option}
    else:
        updated = current | {option}
    return {**form_data, spec.name: updated}

"""
Review & Progress

Aggregates collected data for the final review step and derives the
per-step status shown by a progress indicator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping

from ..config.models import FieldConfig, FieldKind
from .fields import FileHandle
from .state import WizardSession
from .steps import Flow


EMPTY_DISPLAY = "-"


class StepStatus(str, Enum):
    """Status of a step in the progress indicator."""
    PENDING = "pending"
    ACTIVE = "active"
    ERROR = "error"
    LOADING = "loading"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ReviewEntry:
    """One row of the review summary."""
    name: str
    label: str
    display: str
    step: int


@dataclass(frozen=True)
class StepProgress:
    """Progress indicator entry for one step."""
    index: int
    label: str
    status: StepStatus
    clickable: bool


def describe_file(handle: FileHandle) -> str:
    """File name with its size in KB, e.g. 'license.pdf (12.50 KB)'."""
    return f"{handle.name} ({handle.size / 1024:.2f} KB)"


def display_value(spec: FieldConfig, value: Any) -> str:
    """Human-readable rendering of a field value."""
    if spec.kind == FieldKind.MULTISELECT:
        selected = set(value or ())
        # Declared options first, in their order, then anything else
        ordered = [o for o in spec.options if o in selected]
        ordered += sorted(selected.difference(spec.options))
        return ", ".join(ordered) or EMPTY_DISPLAY
    if spec.kind == FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    if spec.kind == FieldKind.FILE:
        return value.name if value is not None else EMPTY_DISPLAY
    if spec.kind == FieldKind.FILES:
        return ", ".join(f.name for f in value or ()) or EMPTY_DISPLAY
    return value or EMPTY_DISPLAY


def review_entries(flow: Flow, form_data: Mapping[str, Any]) -> List[ReviewEntry]:
    """Review rows for every field, in declared order."""
    entries = []
    for step in flow.steps:
        for spec in step.fields:
            entries.append(ReviewEntry(
                name=spec.name,
                label=spec.label,
                display=display_value(spec, form_data.get(spec.name)),
                step=step.index,
            ))
    return entries


def step_statuses(flow: Flow, session: WizardSession) -> List[StepProgress]:
    """
    Progress entries for each step.

    Steps before the current one are completed (and clickable), later
    ones are pending. The current one is loading while a submission is
    in flight, in error while any of its fields shows an error, and
    active otherwise.
    """
    visible = session.visible_errors()
    progress = []
    for step in flow.steps:
        if step.index < session.current_step:
            status = StepStatus.COMPLETED
        elif step.index == session.current_step:
            if session.is_submitting:
                status = StepStatus.LOADING
            elif any(name in visible for name in step.field_names):
                status = StepStatus.ERROR
            else:
                status = StepStatus.ACTIVE
        else:
            status = StepStatus.PENDING
        progress.append(StepProgress(
            index=step.index,
            label=step.label,
            status=status,
            clickable=status == StepStatus.COMPLETED and session.is_idle,
        ))
    return progress


def progress_percent(flow: Flow, session: WizardSession) -> int:
    """Share of steps already completed, as a whole percentage."""
    return int((session.current_step / flow.step_count) * 100)

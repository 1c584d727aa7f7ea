"""
Wizard State Management

The session record of a wizard and the reducer-style transitions
over it. Every transition returns a new session; none mutates one
in place.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ..config.models import FieldKind
from .fields import FieldChange, check_kind, coerce, set_field, toggle_option
from .steps import Flow
from .validators import ErrorMap, validate_field

logger = logging.getLogger(__name__)


class SubmissionState(str, Enum):
    """Submission status of a session."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    COMPLETE = "complete"


@dataclass(frozen=True)
class WizardSession:
    """Immutable snapshot of one wizard session."""
    form_data: Dict[str, Any]
    current_step: int = 0
    errors: Dict[str, str] = field(default_factory=dict)
    touched: FrozenSet[str] = frozenset()
    submission_state: SubmissionState = SubmissionState.IDLE
    submission_error: Optional[str] = None

    @property
    def is_idle(self) -> bool:
        return self.submission_state == SubmissionState.IDLE

    @property
    def is_submitting(self) -> bool:
        return self.submission_state == SubmissionState.SUBMITTING

    def visible_errors(self) -> ErrorMap:
        """Errors of touched fields only (the ones a host should display)."""
        return {name: msg for name, msg in self.errors.items() if name in self.touched}

    def error_for(self, name: str) -> Optional[str]:
        """Displayable error for one field, if any."""
        if name in self.touched:
            return self.errors.get(name)
        return None


def initialize(flow: Flow, initial_data: Optional[Mapping[str, Any]] = None) -> WizardSession:
    """
    Create a fresh session at step 0.

    Args:
        flow: The flow the session belongs to
        initial_data: Values laid over the declared defaults. Keys the
            flow does not declare are ignored.

    Returns:
        A new idle session
    """
    form_data = flow.defaults()
    for name, value in (initial_data or {}).items():
        if not flow.has_field(name):
            logger.debug("Ignoring unknown initial field %s for flow %s", name, flow.name)
            continue
        form_data[name] = coerce(flow.field(name), value)
    return WizardSession(form_data=form_data)


def reset(flow: Flow, initial_data: Optional[Mapping[str, Any]] = None) -> WizardSession:
    """Return the session to its initialize defaults."""
    return initialize(flow, initial_data)


def _refresh_error(errors: Mapping[str, str], flow: Flow, name: str, form_data: Mapping[str, Any]) -> Dict[str, str]:
    """Re-check a field that currently shows an error."""
    if name not in errors:
        return dict(errors)
    updated = dict(errors)
    message = validate_field(flow.field(name), form_data.get(name))
    if message:
        updated[name] = message
    else:
        del updated[name]
    return updated


def update_field(
    session: WizardSession,
    flow: Flow,
    name: str,
    raw_input: Any,
    kind: Optional[FieldKind] = None,
) -> WizardSession:
    """
    Apply a field edit and mark the field touched.

    Args:
        session: Current session
        flow: The session's flow
        name: Field name
        raw_input: Host value (checkbox state, file list, text, ...)
        kind: Kind declared by the change event, checked against the field

    Returns:
        The new session, or the same session while not idle

    Raises:
        UnknownFieldError: If the flow has no such field
        FieldKindError: If the value or declared kind does not fit the field
    """
    if not session.is_idle:
        logger.debug("Ignoring edit of %s while %s", name, session.submission_state.value)
        return session

    spec = flow.field(name)
    check_kind(spec, kind)
    form_data = set_field(session.form_data, spec, raw_input)
    return replace(
        session,
        form_data=form_data,
        touched=session.touched | {name},
        errors=_refresh_error(session.errors, flow, name, form_data),
    )


def apply_change(session: WizardSession, flow: Flow, change: FieldChange) -> WizardSession:
    """Apply a host field-change event."""
    return update_field(session, flow, change.field_name, change.raw_value, change.value_kind)


def toggle_multi_value(session: WizardSession, flow: Flow, name: str, option: str) -> WizardSession:
    """
    Toggle one option of a multiselect field and mark it touched.

    Toggling the same option twice restores the original set.
    """
    if not session.is_idle:
        logger.debug("Ignoring toggle of %s while %s", name, session.submission_state.value)
        return session

    spec = flow.field(name)
    form_data = toggle_option(session.form_data, spec, option)
    return replace(
        session,
        form_data=form_data,
        touched=session.touched | {name},
        errors=_refresh_error(session.errors, flow, name, form_data),
    )


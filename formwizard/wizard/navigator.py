"""
Wizard Navigation

Handles advance/back/jump navigation between steps. Forward moves are
gated by step validation; backward moves never are.
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Tuple

from .state import WizardSession
from .steps import Flow

logger = logging.getLogger(__name__)


class NavigationOutcome(str, Enum):
    """What a navigation intent did."""
    ADVANCED = "advanced"
    BLOCKED = "blocked"
    SUBMIT = "submit"
    RETREATED = "retreated"
    JUMPED = "jumped"
    IGNORED = "ignored"


NavigationResult = Tuple[WizardSession, NavigationOutcome]


class NavigationController:
    """
    Governs step advance, retreat and jump for one flow.

    All methods are pure: they take a session and return a new one
    together with the outcome. While a submission is in flight every
    intent is ignored.
    """

    def __init__(self, flow: Flow):
        """
        Initialize navigator.

        Args:
            flow: The flow whose steps are navigated
        """
        self.flow = flow

    def advance(self, session: WizardSession) -> NavigationResult:
        """
        Move forward one step if the current step validates.

        On the last step a valid session is not moved; the outcome is
        SUBMIT and the caller hands it to the SubmissionCoordinator.
        """
        if not session.is_idle:
            return session, NavigationOutcome.IGNORED

        index = session.current_step
        errors = self.flow.validate_step(index, session.form_data)
        if errors:
            logger.debug("Step %d of %s blocked: %s", index, self.flow.name, sorted(errors))
            return replace(
                session,
                errors=errors,
                touched=session.touched | frozenset(errors),
            ), NavigationOutcome.BLOCKED

        if index < self.flow.last_index:
            return replace(session, current_step=index + 1, errors={}), NavigationOutcome.ADVANCED

        return replace(session, errors={}), NavigationOutcome.SUBMIT

    def retreat(self, session: WizardSession) -> NavigationResult:
        """Move back one step (floored at step 0). No validation is run."""
        if not session.is_idle or session.current_step == 0:
            return session, NavigationOutcome.IGNORED
        return replace(session, current_step=session.current_step - 1), NavigationOutcome.RETREATED

    def jump_to(self, session: WizardSession, target: int) -> NavigationResult:
        """
        Jump to an already visited step.

        Skipping ahead is not allowed: a target beyond the current
        step (or below 0) leaves the session unchanged.
        """
        if not session.is_idle or not 0 <= target <= session.current_step:
            return session, NavigationOutcome.IGNORED
        return replace(session, current_step=target), NavigationOutcome.JUMPED

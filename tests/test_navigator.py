"""Tests for step navigation rules."""

from dataclasses import replace

import pytest

from formwizard.wizard.navigator import NavigationController, NavigationOutcome
from formwizard.wizard.state import SubmissionState, initialize, update_field


@pytest.fixture
def navigator(buyer_flow) -> NavigationController:
    return NavigationController(buyer_flow)


def test_advance_blocked_keeps_index_and_sets_errors(buyer_flow, navigator) -> None:
    """Advancing an empty buyer step 0 reports both required fields."""
    session, outcome = navigator.advance(initialize(buyer_flow))

    assert outcome == NavigationOutcome.BLOCKED
    assert session.current_step == 0
    assert session.errors == {"name": "Name is required.", "company": "Company is required."}
    assert session.visible_errors() == session.errors


def test_advance_after_fixing_moves_forward(buyer_flow, navigator) -> None:
    session, _ = navigator.advance(initialize(buyer_flow))
    session = update_field(session, buyer_flow, "name", "Ada")
    session = update_field(session, buyer_flow, "company", "Acme")

    session, outcome = navigator.advance(session)
    assert outcome == NavigationOutcome.ADVANCED
    assert session.current_step == 1
    assert session.errors == {}


def test_advance_on_last_step_requests_submit(buyer_flow, navigator) -> None:
    session = replace(initialize(buyer_flow), current_step=buyer_flow.last_index)
    advanced, outcome = navigator.advance(session)
    assert outcome == NavigationOutcome.SUBMIT
    assert advanced.current_step == buyer_flow.last_index


@pytest.mark.parametrize("start, expected", [(0, 0), (1, 0), (4, 3)])
def test_retreat_never_validates(buyer_flow, navigator, start, expected) -> None:
    """Retreat works even though every step is invalid."""
    session = replace(initialize(buyer_flow), current_step=start)
    session, _ = navigator.retreat(session)
    assert session.current_step == expected


def test_jump_back_allowed_forward_ignored(buyer_flow, navigator) -> None:
    session = replace(initialize(buyer_flow), current_step=3)

    jumped, outcome = navigator.jump_to(session, 1)
    assert outcome == NavigationOutcome.JUMPED
    assert jumped.current_step == 1

    same, outcome = navigator.jump_to(session, 4)
    assert outcome == NavigationOutcome.IGNORED
    assert same is session

    same, outcome = navigator.jump_to(session, -1)
    assert outcome == NavigationOutcome.IGNORED


def test_navigation_ignored_while_submitting(buyer_flow, navigator) -> None:
    session = replace(
        initialize(buyer_flow),
        current_step=2,
        submission_state=SubmissionState.SUBMITTING,
    )
    for result in (navigator.advance(session), navigator.retreat(session), navigator.jump_to(session, 0)):
        assert result == (session, NavigationOutcome.IGNORED)

"""
Wizard Controller

Owns one wizard session and wires field edits, navigation, draft
autosave and submission together for a host.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..config.models import FieldKind, WizardSettings
from .fields import FieldChange
from .navigator import NavigationController, NavigationOutcome
from .persistence import DraftPersistence, FileStore, KeyValueStore, SaveStatus
from .review import ReviewEntry, StepProgress, review_entries, step_statuses
from .scheduler import AsyncioScheduler, Scheduler
from .state import WizardSession, apply_change, initialize, toggle_multi_value, update_field
from .steps import Flow, StepDefinition
from .submission import CompletionCallback, CompletionOperation, SubmissionCoordinator
from .validators import ErrorMap

logger = logging.getLogger(__name__)


class WizardController:
    """
    Session owner for one flow.

    Field edits and navigation are applied as sequential transitions
    on an immutable session. Every change to the form data schedules
    a debounced draft save. While a submission is in flight all entry
    points are ignored.
    """

    def __init__(
        self,
        flow: Flow,
        store: Optional[KeyValueStore] = None,
        scheduler: Optional[Scheduler] = None,
        on_complete: Optional[CompletionCallback] = None,
        completion: Optional[CompletionOperation] = None,
        settings: Optional[WizardSettings] = None,
        initial_data: Optional[Mapping[str, Any]] = None,
        reset_on_complete: bool = True,
    ):
        """
        Initialize the controller and hydrate a saved draft.

        Args:
            flow: The flow to run
            store: Draft store (no autosave when None)
            scheduler: Scheduler for the debounced save
            on_complete: Callback given the final form data
            completion: Async completion operation (defaults to simulated latency)
            settings: Engine settings
            initial_data: Host-supplied starting values
            reset_on_complete: Start over with a fresh session after success
        """
        self.flow = flow
        self.settings = settings or WizardSettings()
        self.navigator = NavigationController(flow)
        self.initial_data: Dict[str, Any] = dict(initial_data or {})

        self.drafts: Optional[DraftPersistence] = None
        if store is not None and self.settings.autosave.enabled:
            self.drafts = DraftPersistence(
                flow,
                store,
                scheduler or AsyncioScheduler(),
                delay=self.settings.autosave.delay_ms / 1000,
            )

        self.coordinator = SubmissionCoordinator(
            flow,
            drafts=self.drafts,
            on_complete=on_complete,
            completion=completion,
            validate_all_steps=self.settings.submission.validate_all_steps,
            simulate_latency=self.settings.submission.simulate_latency,
            reset_on_complete=reset_on_complete,
            initial_data=self.initial_data,
        )

        hydrated = self.drafts.load() if self.drafts is not None else {}
        self.resumed = bool(hydrated)
        self._session = initialize(flow, {**self.initial_data, **hydrated})

    @classmethod
    def from_settings(
        cls,
        flow: Flow,
        settings: WizardSettings,
        scheduler: Optional[Scheduler] = None,
        **kwargs: Any,
    ) -> "WizardController":
        """Build a controller whose drafts live in the configured directory."""
        draft_dir = settings.autosave.draft_dir
        store = FileStore(Path(draft_dir) if draft_dir else None)
        return cls(flow, store=store, scheduler=scheduler, settings=settings, **kwargs)

    # ------------------------------------------------------------
    # Session accessors
    # ------------------------------------------------------------

    @property
    def session(self) -> WizardSession:
        return self._session

    @property
    def form_data(self) -> Dict[str, Any]:
        return self._session.form_data

    @property
    def current_step(self) -> int:
        return self._session.current_step

    @property
    def step(self) -> StepDefinition:
        return self.flow.steps[self._session.current_step]

    @property
    def is_last_step(self) -> bool:
        return self._session.current_step == self.flow.last_index

    @property
    def save_status(self) -> SaveStatus:
        if self.drafts is None:
            return SaveStatus.SAVED
        return self.drafts.status

    def visible_errors(self) -> ErrorMap:
        return self._session.visible_errors()

    def review(self) -> List[ReviewEntry]:
        return review_entries(self.flow, self._session.form_data)

    def progress(self) -> List[StepProgress]:
        return step_statuses(self.flow, self._session)

    # ------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------

    def _commit(self, session: WizardSession) -> WizardSession:
        if session is self._session:
            return session
        changed = session.form_data != self._session.form_data
        self._session = session
        if changed and self.drafts is not None:
            self.drafts.schedule(session.form_data)
        return session

    def update_field(self, name: str, raw_value: Any, kind: Optional[FieldKind] = None) -> WizardSession:
        """Apply a field edit (ignored while submitting)."""
        return self._commit(update_field(self._session, self.flow, name, raw_value, kind))

    def apply(self, change: FieldChange) -> WizardSession:
        """Apply a host field-change event."""
        return self._commit(apply_change(self._session, self.flow, change))

    def toggle_multi_value(self, name: str, option: str) -> WizardSession:
        """Toggle a multiselect option (ignored while submitting)."""
        return self._commit(toggle_multi_value(self._session, self.flow, name, option))

    # ------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------

    async def advance(self) -> NavigationOutcome:
        """
        Validate the current step and move forward.

        On the last step a valid session is submitted instead.
        """
        session, outcome = self.navigator.advance(self._session)
        self._session = session
        if outcome == NavigationOutcome.SUBMIT:
            await self.submit()
        return outcome

    def retreat(self) -> NavigationOutcome:
        """Go back one step without validating."""
        self._session, outcome = self.navigator.retreat(self._session)
        return outcome

    def jump_to(self, target: int) -> NavigationOutcome:
        """Jump back to a visited step; forward jumps are ignored."""
        self._session, outcome = self.navigator.jump_to(self._session, target)
        return outcome

    # ------------------------------------------------------------
    # Submission & drafts
    # ------------------------------------------------------------

    async def submit(self) -> WizardSession:
        """
        Submit from the last step.

        The SUBMITTING session is published before the completion is
        awaited, so concurrent edits and navigation are ignored until
        it resolves.
        """
        started = self.coordinator.begin(self._session)
        self._session = started
        if not started.is_submitting:
            return started
        self._session = await self.coordinator.run(started)
        return self._session

    def flush_draft(self) -> bool:
        """Write a pending draft save now."""
        if self.drafts is None:
            return False
        return self.drafts.flush()

    def start_fresh(self) -> WizardSession:
        """Delete any saved draft and start over from the defaults."""
        if not self._session.is_idle:
            return self._session
        if self.drafts is not None:
            self.drafts.discard()
        self.resumed = False
        self._session = initialize(self.flow, self.initial_data)
        return self._session

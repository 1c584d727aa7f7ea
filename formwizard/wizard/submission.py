"""
Submission

Finalizes a wizard: validates, runs the asynchronous completion,
hands the final data to the completion callback, deletes the draft
and resets the session.
"""

import asyncio
import inspect
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from .errors import SubmissionError
from .fields import FormData
from .persistence import DraftPersistence
from .state import SubmissionState, WizardSession, initialize
from .steps import Flow

logger = logging.getLogger(__name__)


CompletionOperation = Callable[[FormData], Awaitable[Any]]
CompletionCallback = Callable[[FormData], Any]


class SubmissionCoordinator:
    """
    Runs the single in-flight submission of a session.

    `begin()` is synchronous and moves a valid session into
    SUBMITTING; the caller publishes that session so every other entry
    point sees the lock. `run()` then awaits the completion and returns
    the session to publish afterwards.
    """

    def __init__(
        self,
        flow: Flow,
        drafts: Optional[DraftPersistence] = None,
        on_complete: Optional[CompletionCallback] = None,
        completion: Optional[CompletionOperation] = None,
        validate_all_steps: bool = True,
        simulate_latency: bool = True,
        reset_on_complete: bool = True,
        initial_data: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            flow: The flow being submitted
            drafts: Draft persistence to clear on success
            on_complete: Callback given the final form data, sync or async
            completion: Async operation standing in for the real hand-off.
                Defaults to waiting the flow's submit latency.
            validate_all_steps: Re-validate every step, not only the last
            simulate_latency: Whether the default completion waits at all
            reset_on_complete: Return a fresh session after success
                (otherwise the finished session is kept as COMPLETE)
            initial_data: Values the fresh session starts from
        """
        self.flow = flow
        self.drafts = drafts
        self.on_complete = on_complete
        self.completion = completion or self._simulated_completion
        self.validate_all_steps = validate_all_steps
        self.simulate_latency = simulate_latency
        self.reset_on_complete = reset_on_complete
        self.initial_data: Dict[str, Any] = dict(initial_data or {})

    async def _simulated_completion(self, form_data: FormData) -> None:
        if self.simulate_latency:
            await asyncio.sleep(self.flow.submit_latency)

    def begin(self, session: WizardSession) -> WizardSession:
        """
        Validate and enter SUBMITTING.

        Returns:
            A SUBMITTING session when the data is valid; otherwise the
            session with errors set (and, when an earlier step fails
            the full check, positioned on that step). Sessions that are
            not idle or not on the last step are returned unchanged.
        """
        if not session.is_idle or session.current_step != self.flow.last_index:
            return session

        form_data = session.form_data
        errors = self.flow.validate_step(self.flow.last_index, form_data)
        if errors:
            return replace(session, errors=errors, touched=session.touched | frozenset(errors))

        if self.validate_all_steps:
            first = self.flow.first_invalid_step(form_data)
            if first is not None:
                errors = self.flow.validate_step(first, form_data)
                logger.info("Submission of %s sent back to step %d", self.flow.name, first)
                return replace(
                    session,
                    current_step=first,
                    errors=errors,
                    touched=session.touched | frozenset(errors),
                )

        logger.info("Submitting %s", self.flow.name)
        return replace(
            session,
            errors={},
            submission_state=SubmissionState.SUBMITTING,
            submission_error=None,
        )

    async def run(self, session: WizardSession) -> WizardSession:
        """
        Await the completion of a SUBMITTING session.

        On success the callback gets the final data exactly once, the
        draft is deleted and a fresh session is returned. On failure
        the session goes back to IDLE with its data and step intact,
        the draft is kept, and `submission_error` says what went wrong.
        """
        if not session.is_submitting:
            return session

        snapshot = dict(session.form_data)
        try:
            await self.completion(snapshot)
            if self.on_complete is not None:
                result = self.on_complete(snapshot)
                if inspect.isawaitable(result):
                    await result
        except Exception as e:
            error = SubmissionError(f"Submission failed: {e}")
            logger.warning("%s (flow %s)", error, self.flow.name, exc_info=True)
            return replace(
                session,
                submission_state=SubmissionState.IDLE,
                submission_error=str(error),
            )

        if self.drafts is not None:
            self.drafts.discard()
        logger.info("Submitted %s", self.flow.name)

        if not self.reset_on_complete:
            return replace(session, submission_state=SubmissionState.COMPLETE)
        return initialize(self.flow, self.initial_data)

    async def submit(self, session: WizardSession) -> WizardSession:
        """Validate and run a submission in one call."""
        return await self.run(self.begin(session))

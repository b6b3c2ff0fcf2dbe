"""
Easy Apply wizard driver.

A small state machine that takes one opened posting to a terminal outcome:

    OPENED ──> WIZARD_STARTED ──> STEP_IN_PROGRESS ──┐
       │             │               │   ^  (review / next)
       │             │               │   └───┘
       v             v               v
  NOT_ELIGIBLE    ABORTED    SUBMITTED | INCOMPLETE | ABORTED

Every transition is preceded by a wait on the document, and every click on
the apply button or inside the wizard is followed by a fixed settle wait.
INCOMPLETE and ABORTED always run the close sequence before drive() returns.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from autoapply.document import DocumentQuery
from autoapply.log import get_logger
from autoapply.models import ApplicationContext, Outcome
from autoapply.selectors import SelectorKind

log = get_logger(__name__)

DEFAULT_MAX_STEPS = 10
ACTION_SETTLE_MS = 1500
CLOSE_CONFIRM_DELAY_MS = 1000


class State(Enum):
    OPENED = "opened"
    WIZARD_STARTED = "wizard_started"
    STEP_IN_PROGRESS = "step_in_progress"
    SUBMITTED = "submitted"
    NOT_ELIGIBLE = "not_eligible"
    INCOMPLETE = "incomplete"
    ABORTED = "aborted"


TERMINAL_STATES: dict[State, Outcome] = {
    State.SUBMITTED: Outcome.SUBMITTED,
    State.NOT_ELIGIBLE: Outcome.NOT_ELIGIBLE,
    State.INCOMPLETE: Outcome.INCOMPLETE,
    State.ABORTED: Outcome.ABORTED,
}

_CLOSE_ON = (State.INCOMPLETE, State.ABORTED)


class ApplicationDriver:
    def __init__(
        self,
        doc: DocumentQuery,
        *,
        delay_ms: int = 3000,
        max_steps: int = DEFAULT_MAX_STEPS,
        settle_ms: int = ACTION_SETTLE_MS,
        close_delay_ms: int = CLOSE_CONFIRM_DELAY_MS,
    ) -> None:
        if max_steps < 1:
            raise ValueError("max_steps must be >= 1")
        self.doc = doc
        self.delay_ms = delay_ms
        self.max_steps = max_steps
        self.settle_ms = settle_ms
        self.close_delay_ms = close_delay_ms
        self.steps_taken = 0
        self._handlers = {
            State.OPENED: self._on_opened,
            State.WIZARD_STARTED: self._on_wizard_started,
            State.STEP_IN_PROGRESS: self._on_step,
        }

    @classmethod
    def from_config(cls, doc: DocumentQuery, config) -> ApplicationDriver:
        return cls(doc, delay_ms=config.delay_ms, max_steps=config.max_wizard_steps)

    def drive(self, context: ApplicationContext) -> Outcome:
        """Run the wizard for one posting. Never raises."""
        self.steps_taken = 0
        label = context.details.label()
        state = State.OPENED
        try:
            while state not in TERMINAL_STATES:
                state = self._handlers[state](context)
        except KeyboardInterrupt:
            self.close_wizard()
            raise
        except Exception as exc:
            log.error(
                "Error in application process for %s (step %d): %s",
                label, self.steps_taken, str(exc)[:150].split("\n")[0],
            )
            state = State.ABORTED

        if state in _CLOSE_ON:
            self.close_wizard()
        outcome = TERMINAL_STATES[state]
        log.debug("Wizard for %s ended %s after %d step(s)", label, outcome.value, self.steps_taken)
        return outcome

    # -- transitions ---------------------------------------------------------

    def _on_opened(self, context: ApplicationContext) -> State:
        if context.easy_apply_only and not context.details.easy_apply:
            log.info("Skipping non-Easy Apply job")
            return State.NOT_ELIGIBLE
        apply_button = self.doc.find_one(SelectorKind.APPLY_BUTTON)
        if apply_button is None:
            log.info("Apply button not found")
            return State.NOT_ELIGIBLE
        self._press(apply_button)
        return State.WIZARD_STARTED

    def _on_wizard_started(self, context: ApplicationContext) -> State:
        self.doc.wait(self.delay_ms)
        if not self.doc.present(SelectorKind.WIZARD):
            log.info("Application modal not found")
            return State.ABORTED
        return State.STEP_IN_PROGRESS

    def _on_step(self, context: ApplicationContext) -> State:
        if self.steps_taken >= self.max_steps:
            log.warning("Too many steps in application (%d), stopping process", self.steps_taken)
            return State.ABORTED

        self.doc.wait(self.delay_ms)
        self.steps_taken += 1

        if self.doc.present(SelectorKind.UNRESOLVED_REQUIRED_FIELD):
            log.info("Complex application form detected - requires manual input")
            return State.INCOMPLETE

        submit = self.doc.find_one(SelectorKind.SUBMIT_BUTTON)
        if submit is not None:
            log.info("Submitting application...")
            self._press(submit)
            return State.SUBMITTED

        review = self.doc.find_one(SelectorKind.REVIEW_BUTTON)
        if review is not None:
            log.info("Reviewing application...")
            self._press(review)
            return State.STEP_IN_PROGRESS

        nxt = self.doc.find_one(SelectorKind.NEXT_BUTTON)
        if nxt is not None:
            log.info("Moving to next step...")
            self._press(nxt)
            return State.STEP_IN_PROGRESS

        log.info("No navigation buttons found, ending application process")
        return State.ABORTED

    def _press(self, element: Any) -> None:
        self.doc.activate(element)
        self.doc.wait(self.settle_ms)

    # -- close sequence ------------------------------------------------------

    def close_wizard(self) -> bool:
        """Dismiss the wizard, then confirm the discard prompt if one shows up.

        Returns whether a dismiss control was found. Failures are logged only.
        """
        try:
            # Only the wizard's own dismiss control; toasts carry the same label.
            dialog = self.doc.find_one(SelectorKind.WIZARD_DIALOG)
            dismiss = self.doc.find_one(SelectorKind.DISMISS_BUTTON, dialog) if dialog is not None else None
            if dismiss is not None:
                self.doc.activate(dismiss)
            self.doc.wait(self.close_delay_ms)
            discard = self.doc.find_one(SelectorKind.DISCARD_CONFIRM)
            if discard is not None:
                self.doc.activate(discard)
            return dismiss is not None
        except Exception as exc:
            log.warning("Error closing modal: %s", str(exc)[:150].split("\n")[0])
            return False

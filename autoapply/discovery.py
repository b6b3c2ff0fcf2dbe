"""
Discovery loop.

Runs: enumerate cards → dedup → filter → open → Easy Apply wizard → count → scroll → repeat,
until the application quota is met, the results run out, or stop() is called.
"""
from __future__ import annotations

import random
from typing import Any

from autoapply.config import AutomationConfig
from autoapply.document import DocumentQuery
from autoapply.driver import ApplicationDriver
from autoapply.filters import FilterEngine
from autoapply.log import get_logger
from autoapply.models import (
    UNKNOWN_COMPANY,
    UNKNOWN_LOCATION,
    UNKNOWN_TITLE,
    ApplicationContext,
    Outcome,
    PostingDetails,
    PostingRef,
    RunState,
    RunSummary,
)
from autoapply.selectors import SelectorKind
from autoapply.tracker import PostingTracker, extract_identity

log = get_logger(__name__)


def _read_text(doc: DocumentQuery, kind: SelectorKind, scope: Any = None) -> str | None:
    element = doc.find_one(kind, scope)
    if element is None:
        return None
    text = doc.text(element)
    return text or None


def read_posting_ref(doc: DocumentQuery, card: Any) -> PostingRef:
    """Identity, title and company from one result card; blanks where unreadable."""
    link = doc.find_one(SelectorKind.CARD_TITLE_LINK, card)
    if link is None:
        return PostingRef(identity="", title=None, company=None)
    identity = extract_identity(doc.attribute(link, "href"))
    title = doc.text(link) or None
    company = _read_text(doc, SelectorKind.CARD_COMPANY, card)
    return PostingRef(identity=identity, title=title, company=company)


def open_posting(doc: DocumentQuery, card: Any, delay_ms: int) -> bool:
    """Click the card title so the detail pane shows this posting."""
    link = doc.find_one(SelectorKind.CARD_TITLE_LINK, card)
    if link is None:
        return False
    try:
        doc.activate(link)
    except Exception as exc:
        log.warning("Error clicking job card: %s", str(exc)[:150].split("\n")[0])
        return False
    doc.wait(delay_ms)
    return True


def extract_details(doc: DocumentQuery, fallback_identity: str, delay_ms: int) -> PostingDetails:
    """Read the opened posting from the detail pane, waiting once if it has not rendered."""
    if not doc.present(SelectorKind.DETAIL_TITLE):
        doc.wait(delay_ms)
    identity = extract_identity(doc.current_url()) or fallback_identity
    return PostingDetails(
        identity=identity,
        title=_read_text(doc, SelectorKind.DETAIL_TITLE) or UNKNOWN_TITLE,
        company=_read_text(doc, SelectorKind.DETAIL_COMPANY) or UNKNOWN_COMPANY,
        location=_read_text(doc, SelectorKind.DETAIL_LOCATION) or UNKNOWN_LOCATION,
        easy_apply=doc.present(SelectorKind.APPLY_BUTTON),
    )


class DiscoveryLoop:
    def __init__(
        self,
        doc: DocumentQuery,
        config: AutomationConfig,
        *,
        driver: ApplicationDriver | None = None,
        filters: FilterEngine | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.doc = doc
        self.config = config
        self.driver = driver or ApplicationDriver.from_config(doc, config)
        self.filters = filters or FilterEngine.from_config(config)
        self.rng = rng or random.Random()
        self.state = RunState()
        self.tracker = PostingTracker()
        self._stage = "idle"
        self._active = False

    @property
    def running(self) -> bool:
        return self.state.running

    def start(self) -> RunSummary | None:
        """Run once; a call made while a run is active does nothing."""
        if self._active:
            log.info("Automation is already running")
            return None
        self._active = True
        try:
            return self.run()
        finally:
            self._active = False

    def stop(self) -> None:
        """Ask the current run to finish once the current pass is done."""
        if not self.state.running:
            log.info("Automation is not running")
            return
        self.state.running = False
        log.info("Stopping automation")

    def run(self) -> RunSummary:
        self.state = RunState(running=True)
        self.tracker = PostingTracker()
        quota = self.config.max_applications
        log.info("Starting LinkedIn job automation (quota %d)", quota)

        try:
            while self.state.running and self.state.applied < quota:
                self.state.passes += 1
                self._stage = "enumerate"
                cards = self.doc.find_all(SelectorKind.POSTING_CARD)
                log.info("Found %d job cards", len(cards))

                for card in cards:
                    if self.state.applied >= quota:
                        log.info("Reached maximum number of applications")
                        break
                    self._process_card(card)

                if self.state.applied >= quota:
                    break
                if not self.state.running:
                    break
                if not self.config.auto_scroll:
                    log.info("Auto-scroll disabled; not loading more jobs")
                    break
                self._stage = "scroll"
                log.info("Scrolling to load more jobs...")
                if not self.doc.request_more_content():
                    break
        except KeyboardInterrupt:
            log.warning("Interrupted during %s; stopping", self._stage)
        except Exception as exc:
            self.state.errored = True
            log.exception("Error in automation during %s: %s", self._stage, exc)
        finally:
            self.state.running = False
            self._stage = "idle"
            log.info(
                "Automation completed. Applied to %d jobs (%d considered, %d filtered, %d not eligible, %d failed).",
                self.state.applied, self.state.considered, self.state.filtered,
                self.state.not_eligible, self.state.failed,
            )

        return RunSummary.from_state(self.state, quota)

    def _process_card(self, card: Any) -> None:
        self._stage = "read card"
        ref = read_posting_ref(self.doc, card)
        if not self.tracker.should_process(ref.identity):
            return
        self.tracker.mark_processed(ref.identity)
        self.state.considered += 1

        self._stage = f"filter {ref.label()}"
        if self.filters.should_reject(ref):
            self.state.filtered += 1
            return

        self._stage = f"open {ref.label()}"
        if not open_posting(self.doc, card, self.config.delay_ms):
            log.info("Could not open job card %s", ref.label())
            self.state.failed += 1
            return
        self.doc.wait(self.config.delay_ms)

        details = extract_details(self.doc, ref.identity, self.config.delay_ms)
        log.info("Processing: %s", details.label())

        if self.config.easy_apply_only and not details.easy_apply:
            log.info("Skipping non-Easy Apply job: %s", details.label())
            self.state.not_eligible += 1
            self._record(ref.identity, Outcome.NOT_ELIGIBLE)
            return

        self._stage = f"apply {details.label()}"
        outcome = self.driver.drive(ApplicationContext(details, self.config.easy_apply_only))
        self._record(ref.identity, outcome)

        if outcome is Outcome.SUBMITTED:
            self.state.applied += 1
            log.info(
                "Successfully applied to %s. (%d/%d)",
                details.label(), self.state.applied, self.config.max_applications,
            )
        else:
            if outcome is Outcome.NOT_ELIGIBLE:
                self.state.not_eligible += 1
            else:
                self.state.failed += 1
            log.info("Could not apply to %s (%s)", details.label(), outcome.value)

        self._pause_between_postings()

    def _record(self, identity: str, outcome: Outcome) -> None:
        self.state.outcomes.append((identity, outcome))

    def _pause_between_postings(self) -> None:
        # Randomized so postings are not opened at a uniform cadence.
        jitter = self.rng.random() * self.config.jitter_spread_ms
        self.doc.wait(self.config.jitter_base_ms + jitter)

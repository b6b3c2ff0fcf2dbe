"""
Pytest fixtures and a scripted stand-in for the LinkedIn jobs page.
"""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from autoapply.config import AutomationConfig
from autoapply.document import DocumentQuery
from autoapply.selectors import SelectorKind

SEARCH_URL = "https://www.linkedin.com/jobs/search/"


@dataclass
class FakePosting:
    """One job card plus the wizard it opens.

    ``wizard`` lists the control shown on each step: "next", "review",
    "submit", "required" (a blank required field) or "stuck" (nothing).
    """

    job_id: Optional[str]
    title: Optional[str] = "Software Engineer"
    company: Optional[str] = "Acme"
    location: str = "Remote"
    easy_apply: bool = True
    wizard: list[str] = field(default_factory=lambda: ["submit"])
    wizard_opens: bool = True
    href: Optional[str] = None

    @property
    def link(self) -> str:
        if self.href is not None:
            return self.href
        if self.job_id:
            return f"/jobs/search/?currentJobId={self.job_id}&keywords=engineer"
        return "/jobs/search/?keywords=engineer"


@dataclass
class FakeElement:
    kind: SelectorKind
    posting: Optional[FakePosting] = None
    text: str = ""


class FakeDocument(DocumentQuery):
    """In-memory page: result batches, a detail pane and an Easy Apply modal."""

    def __init__(
        self,
        *batches: list[FakePosting],
        discard_prompt: bool = True,
        wizard_render_ms: float = 0,
        toast: bool = False,
    ) -> None:
        self._batches = [list(b) for b in batches] or [[]]
        self.visible: list[FakePosting] = list(self._batches[0])
        self._next_batch = 1
        self.current: Optional[FakePosting] = None
        self.wizard_step: Optional[int] = None
        self.discard_prompt = discard_prompt
        self.discard_pending = False
        # The modal renders only once this much wait time has passed after the apply click.
        self.wizard_render_ms = wizard_render_ms
        self._render_elapsed: Optional[float] = None
        # A notification "Dismiss" button that precedes the modal in the page.
        self.toast = toast
        self.toast_dismissals = 0

        self.waits: list[float] = []
        self.activations: list[tuple[SelectorKind, Optional[str]]] = []
        self.submitted: list[str] = []
        self.dismissals = 0
        self.discards = 0
        self.more_requests = 0
        self.enumerations = 0
        self.failures: dict[SelectorKind, Exception] = {}
        self.on_wait: Optional[Callable[[FakeDocument, float], None]] = None

    # -- helpers -------------------------------------------------------------

    @property
    def wizard_open(self) -> bool:
        return self.wizard_step is not None

    def _marker(self) -> Optional[str]:
        if self.wizard_step is None or self.current is None:
            return None
        steps = self.current.wizard
        return steps[self.wizard_step] if self.wizard_step < len(steps) else "stuck"

    def _maybe_fail(self, kind: SelectorKind) -> None:
        if kind in self.failures:
            raise self.failures[kind]

    def opened_ids(self) -> list[Optional[str]]:
        return [jid for kind, jid in self.activations if kind is SelectorKind.CARD_TITLE_LINK]

    def apply_clicks(self) -> list[Optional[str]]:
        return [jid for kind, jid in self.activations if kind is SelectorKind.APPLY_BUTTON]

    # -- DocumentQuery -------------------------------------------------------

    def find_all(self, kind: SelectorKind) -> list[FakeElement]:
        self._maybe_fail(kind)
        if kind is SelectorKind.POSTING_CARD:
            self.enumerations += 1
            return [FakeElement(kind, p) for p in self.visible]
        return []

    def find_one(self, kind: SelectorKind, scope=None) -> Optional[FakeElement]:
        self._maybe_fail(kind)
        card = scope.posting if scope is not None else None
        current = self.current
        marker = self._marker()

        if kind is SelectorKind.CARD_TITLE_LINK and card is not None:
            return FakeElement(kind, card, card.title or "")
        if kind is SelectorKind.CARD_COMPANY and card is not None and card.company is not None:
            return FakeElement(kind, card, card.company)
        if kind is SelectorKind.DETAIL_TITLE and current is not None and current.title:
            return FakeElement(kind, current, current.title)
        if kind is SelectorKind.DETAIL_COMPANY and current is not None and current.company:
            return FakeElement(kind, current, current.company)
        if kind is SelectorKind.DETAIL_LOCATION and current is not None:
            return FakeElement(kind, current, current.location)
        if kind is SelectorKind.APPLY_BUTTON and current is not None and current.easy_apply:
            return FakeElement(kind, current, "Easy Apply")
        if kind is SelectorKind.SUBMIT_BUTTON and marker == "submit":
            return FakeElement(kind, current)
        if kind is SelectorKind.REVIEW_BUTTON and marker == "review":
            return FakeElement(kind, current)
        if kind is SelectorKind.NEXT_BUTTON and marker == "next":
            return FakeElement(kind, current)
        if kind is SelectorKind.WIZARD_DIALOG and self.wizard_open:
            return FakeElement(kind, current)
        if kind is SelectorKind.DISMISS_BUTTON:
            if scope is None:
                return FakeElement(kind, None, "toast") if self.toast else None
            if scope.kind is SelectorKind.WIZARD_DIALOG and self.wizard_open:
                return FakeElement(kind, current)
        if kind is SelectorKind.DISCARD_CONFIRM and self.discard_pending:
            return FakeElement(kind, current)
        if kind is SelectorKind.RESULTS_LIST:
            return FakeElement(kind)
        return None

    def text(self, element: FakeElement) -> str:
        return element.text

    def attribute(self, element: FakeElement, name: str) -> Optional[str]:
        if name == "href" and element.posting is not None:
            return element.posting.link
        return None

    def current_url(self) -> str:
        if self.current is not None and self.current.job_id:
            return f"{SEARCH_URL}?currentJobId={self.current.job_id}"
        return SEARCH_URL

    def activate(self, element: FakeElement) -> None:
        self._maybe_fail(element.kind)
        if element.kind is SelectorKind.DISMISS_BUTTON and element.text == "toast":
            self.toast_dismissals += 1
            return
        posting = element.posting
        self.activations.append((element.kind, posting.job_id if posting else None))
        kind = element.kind
        if kind is SelectorKind.CARD_TITLE_LINK:
            self.current = posting
            self.wizard_step = None
            self._render_elapsed = None
        elif kind is SelectorKind.APPLY_BUTTON:
            if posting.wizard_opens:
                if self.wizard_render_ms > 0:
                    self._render_elapsed = 0
                else:
                    self.wizard_step = 0
        elif kind in (SelectorKind.NEXT_BUTTON, SelectorKind.REVIEW_BUTTON):
            self.wizard_step += 1
        elif kind is SelectorKind.SUBMIT_BUTTON:
            self.submitted.append(posting.job_id)
            self.wizard_step = None
        elif kind is SelectorKind.DISMISS_BUTTON:
            self.dismissals += 1
            self.wizard_step = None
            self.discard_pending = self.discard_prompt
        elif kind is SelectorKind.DISCARD_CONFIRM:
            self.discards += 1
            self.discard_pending = False

    def present(self, kind: SelectorKind) -> bool:
        self._maybe_fail(kind)
        if kind is SelectorKind.WIZARD:
            return self.wizard_open
        if kind is SelectorKind.UNRESOLVED_REQUIRED_FIELD:
            return self._marker() == "required"
        if kind is SelectorKind.DETAIL_TITLE:
            return self.current is not None and bool(self.current.title)
        if kind is SelectorKind.APPLY_BUTTON:
            return self.current is not None and self.current.easy_apply
        return False

    def request_more_content(self) -> bool:
        self.more_requests += 1
        if self._next_batch >= len(self._batches):
            return False
        self.visible.extend(self._batches[self._next_batch])
        self._next_batch += 1
        return True

    def wait(self, duration_ms: float) -> None:
        self.waits.append(duration_ms)
        if self._render_elapsed is not None:
            self._render_elapsed += duration_ms
            if self._render_elapsed >= self.wizard_render_ms:
                self._render_elapsed = None
                self.wizard_step = 0
        if self.on_wait is not None:
            self.on_wait(self, duration_ms)


@pytest.fixture
def make_config():
    """AutomationConfig with zero pacing unless overridden."""

    def _make(**overrides) -> AutomationConfig:
        base = dict(delay_ms=0, jitter_base_ms=0, jitter_spread_ms=0)
        base.update(overrides)
        return AutomationConfig(**base)

    return _make


@pytest.fixture
def posting():
    def _make(job_id: Optional[str] = "100", **kwargs) -> FakePosting:
        return FakePosting(job_id=job_id, **kwargs)

    return _make

"""Data models for postings, outcomes and run bookkeeping."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_LOCATION = "Unknown Location"


class Outcome(str, Enum):
    SUBMITTED = "submitted"
    NOT_ELIGIBLE = "not_eligible"
    INCOMPLETE = "incomplete"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PostingRef:
    """A job card as enumerated from the results list.

    ``title`` and ``company`` are None when the card text could not be read.
    """

    identity: str
    title: str | None
    company: str | None

    def label(self) -> str:
        return f"{self.title or '?'} @ {self.company or '?'}"


@dataclass(frozen=True)
class PostingDetails:
    identity: str
    title: str = UNKNOWN_TITLE
    company: str = UNKNOWN_COMPANY
    location: str = UNKNOWN_LOCATION
    easy_apply: bool = False

    def label(self) -> str:
        return f"{self.title} at {self.company}"


@dataclass(frozen=True)
class ApplicationContext:
    """Read-only view handed to the application driver."""

    details: PostingDetails
    easy_apply_only: bool = True


@dataclass
class RunState:
    """Mutable bookkeeping for one run; owned by the discovery loop."""

    applied: int = 0
    considered: int = 0
    filtered: int = 0
    not_eligible: int = 0
    failed: int = 0
    passes: int = 0
    running: bool = False
    errored: bool = False
    outcomes: list[tuple[str, Outcome]] = field(default_factory=list)


@dataclass(frozen=True)
class RunSummary:
    applied: int
    considered: int
    quota: int
    filtered: int = 0
    not_eligible: int = 0
    failed: int = 0
    passes: int = 0
    errored: bool = False

    @classmethod
    def from_state(cls, state: RunState, quota: int) -> RunSummary:
        return cls(
            applied=state.applied,
            considered=state.considered,
            quota=quota,
            filtered=state.filtered,
            not_eligible=state.not_eligible,
            failed=state.failed,
            passes=state.passes,
            errored=state.errored,
        )

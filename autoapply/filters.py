"""Skip postings whose title or company matches an exclusion list."""
from __future__ import annotations

from typing import Sequence

from autoapply.log import get_logger
from autoapply.models import PostingRef

log = get_logger(__name__)


def _normalize(s: str) -> str:
    return s.lower().strip()


def _first_match(text: str, needles: Sequence[str]) -> str | None:
    for needle in needles:
        if needle and needle in text:
            return needle
    return None


class FilterEngine:
    def __init__(self, blacklist_titles: Sequence[str] = (), blacklist_companies: Sequence[str] = ()) -> None:
        self.titles: tuple[str, ...] = tuple(_normalize(t) for t in blacklist_titles)
        self.companies: tuple[str, ...] = tuple(_normalize(c) for c in blacklist_companies)

    @classmethod
    def from_config(cls, config) -> FilterEngine:
        return cls(config.blacklist_titles, config.blacklist_companies)

    def should_reject(self, posting: PostingRef) -> bool:
        """True when the posting must be skipped.

        Unreadable title or company rejects; an unknown posting is never let through.
        """
        if posting.title is None or posting.company is None:
            log.info("Filtering job with unreadable card text: %s", posting.label())
            return True

        title = _normalize(posting.title)
        company = _normalize(posting.company)

        hit = _first_match(title, self.titles)
        if hit is not None:
            log.info("Filtering job with blacklisted title: %s (matched %r)", title, hit)
            return True

        hit = _first_match(company, self.companies)
        if hit is not None:
            log.info("Filtering job with blacklisted company: %s (matched %r)", company, hit)
            return True

        return False

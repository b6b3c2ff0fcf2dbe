"""Remember which postings this run has already handled."""
from __future__ import annotations

from urllib.parse import parse_qs, urljoin, urlparse

from autoapply.log import get_logger

log = get_logger(__name__)

LINKEDIN_ORIGIN = "https://www.linkedin.com"
JOB_ID_PARAM = "currentJobId"


def extract_identity(url: str | None) -> str:
    """The ``currentJobId`` of a card link, or "" when it has none."""
    if not url:
        return ""
    try:
        query = urlparse(urljoin(LINKEDIN_ORIGIN, url.strip())).query
    except ValueError:
        return ""
    values = parse_qs(query).get(JOB_ID_PARAM, [])
    return values[0].strip() if values else ""


class PostingTracker:
    """In-memory seen-set for one run; identities are only ever added."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, identity: object) -> bool:
        return identity in self._seen

    def should_process(self, identity: str | None) -> bool:
        # Unaddressable postings count as seen.
        if not identity:
            return False
        return identity not in self._seen

    def mark_processed(self, identity: str) -> None:
        if not identity:
            raise ValueError("cannot track a posting without an identity")
        if identity in self._seen:
            log.debug("Posting %s already tracked", identity)
            return
        self._seen.add(identity)
        log.debug("Tracked posting %s (%d this run)", identity, len(self._seen))

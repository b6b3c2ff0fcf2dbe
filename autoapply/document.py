"""The page capability the automation runs against."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from autoapply.selectors import SelectorKind


class DocumentQuery(ABC):
    """What the automation needs from the live page.

    Elements are opaque handles; only the implementation that returned them
    knows what they are. Lookups only report elements a user could see.
    """

    @abstractmethod
    def find_all(self, kind: SelectorKind) -> list[Any]:
        pass

    @abstractmethod
    def find_one(self, kind: SelectorKind, scope: Any = None) -> Any | None:
        pass

    @abstractmethod
    def text(self, element: Any) -> str:
        pass

    @abstractmethod
    def attribute(self, element: Any, name: str) -> str | None:
        pass

    @abstractmethod
    def current_url(self) -> str:
        pass

    @abstractmethod
    def activate(self, element: Any) -> None:
        pass

    @abstractmethod
    def present(self, kind: SelectorKind) -> bool:
        pass

    @abstractmethod
    def request_more_content(self) -> bool:
        """Load more postings; True if the list actually grew."""

    @abstractmethod
    def wait(self, duration_ms: float) -> None:
        pass

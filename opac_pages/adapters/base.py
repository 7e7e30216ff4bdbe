# ==============================================
# LayoutAdapter (base)
# ==============================================
#
# PURPOSE:
#   Shared constants and helpers for the two layout adapters.
#   Each adapter implements the same five operations against
#   its own physical tables:
#
#     create(key, title, content) -> int
#     exists(key) -> bool
#     update(key, title=None, content=None) -> bool
#     delete(key) -> bool
#     page_url(key) -> str
#
#   `key` is always a normalized PageKey.
#
# ==============================================

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Dict, Optional

from opac_pages.identity import PageKey

# Marks a row as an OPAC page among other additional contents
PAGE_CATEGORY = "pages"
PAGE_LOCATION = "opac_only"
PAGE_NUMBER = 0

OPAC_PAGE_VIEWER = "/cgi-bin/koha/opac-page.pl"


def page_url_for(page_id: int) -> str:
    return f"{OPAC_PAGE_VIEWER}?page_id={page_id}"


class LayoutAdapter(ABC):
    """Base class for the unified and split layout adapters."""

    def __init__(self, db, clock: Optional[Callable[[], date]] = None):
        self._db = db
        self._clock = clock or date.today

    def _page_filter(self, code: str) -> Dict[str, Any]:
        return {
            "category": PAGE_CATEGORY,
            "code": code,
            "location": PAGE_LOCATION,
        }

    def _publication_fields(self) -> Dict[str, Any]:
        return {
            "category": PAGE_CATEGORY,
            "location": PAGE_LOCATION,
            "published_on": self._clock().strftime("%Y-%m-%d"),
            "number": PAGE_NUMBER,
        }

    @staticmethod
    def _changes(title: Optional[str], content: Optional[str]) -> Dict[str, str]:
        # Only fields the caller supplied are written
        changes = {}
        if title is not None:
            changes["title"] = title
        if content is not None:
            changes["content"] = content
        return changes

    @abstractmethod
    def create(self, key: PageKey, title: str, content: str) -> int:
        ...

    @abstractmethod
    def exists(self, key: PageKey) -> bool:
        ...

    @abstractmethod
    def update(self, key: PageKey, title: Optional[str] = None, content: Optional[str] = None) -> bool:
        ...

    @abstractmethod
    def delete(self, key: PageKey) -> bool:
        ...

    @abstractmethod
    def page_url(self, key: PageKey) -> str:
        ...

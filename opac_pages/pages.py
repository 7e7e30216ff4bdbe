# ==============================================
# PageManager — Dispatch Façade
# ==============================================
#
# PURPOSE:
#   The single public entry point for OPAC page management.
#   Callers never touch the adapters or the probe directly.
#
#   ┌──────────────┐   normalize   ┌──────────────┐
#   │    caller    │ ────────────▶ │ PageManager  │
#   └──────────────┘               └──────┬───────┘
#                                         │ detect_layout() (cached)
#                                         ▼
#                    ┌────────────────────┴────────────────────┐
#                    │ Layout.UNIFIED          Layout.SPLIT    │
#                    ▼                                         ▼
#          UnifiedLayoutAdapter                    SplitLayoutAdapter
#                    └──────────────┬──────────────────────────┘
#                                   ▼
#                               MySQLClient
#
# PUBLIC API:
# -----------
#   create_page(code, title, content, lang="default", branchcode=None) -> int
#   update_page(code, lang="default", title=None, content=None) -> True
#   delete_page(code, lang="default") -> True
#   page_exists(code, lang="default") -> bool
#   get_page_url(code) -> str
#
#   Results and errors from the adapters are passed through as-is.
#
#   The module-level functions of the same names use a default
#   PageManager built from get_config() on first use.
#
# ==============================================

import logging
import threading
from datetime import date
from typing import Callable, Dict, Optional

from opac_pages.adapters import LayoutAdapter, SplitLayoutAdapter, UnifiedLayoutAdapter
from opac_pages.config import AppConfig, get_config
from opac_pages.identity import UNSET, Branch, normalize_key, require_fields
from opac_pages.schema import Layout, SchemaProbe
from opac_pages.storage import MySQLClient

logger = logging.getLogger(__name__)


class PageManager:
    """Create, update, delete and look up OPAC pages on either layout."""

    def __init__(
        self,
        db,
        probe: Optional[SchemaProbe] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self._db = db
        self._probe = probe or SchemaProbe(db)
        self._adapters: Dict[Layout, LayoutAdapter] = {
            Layout.UNIFIED: UnifiedLayoutAdapter(db, clock),
            Layout.SPLIT: SplitLayoutAdapter(db, clock),
        }

    @property
    def layout(self) -> Layout:
        return self._probe.detect_layout()

    def _adapter(self) -> LayoutAdapter:
        return self._adapters[self._probe.detect_layout()]

    def create_page(
        self,
        code: str,
        title: str,
        content: str,
        lang: Optional[str] = None,
        branchcode: Optional[str] = None,
    ) -> int:
        """
        Create a new OPAC page and return its id.

        The id is the additional_contents.idnew on the unified layout and
        the localization id on the split layout.

        Args:
            code: Unique identifier for the page (required)
            title: Title of the page (required)
            content: HTML content for the page (required)
            lang: Language code (default: 'default')
            branchcode: Library code (default: None = all libraries, "" is the same)

        Raises:
            MissingIdentity, MissingParameter, AlreadyExists, PersistenceError
        """
        key = normalize_key(code, lang, branchcode)
        require_fields(title=title, content=content)
        return self._adapter().create(key, title, content)

    def update_page(
        self,
        code: str,
        lang: Optional[str] = None,
        title: Optional[str] = None,
        content: Optional[str] = None,
        branchcode: Branch = UNSET,
    ) -> bool:
        """
        Update title and/or content of an existing page.
        Fields left as None are not touched.

        Raises:
            MissingIdentity, NotFound, PersistenceError
        """
        key = normalize_key(code, lang, branchcode)
        return self._adapter().update(key, title=title, content=content)

    def delete_page(self, code: str, lang: Optional[str] = None, branchcode: Branch = UNSET) -> bool:
        """Delete a page by code and language. Raises NotFound if absent."""
        key = normalize_key(code, lang, branchcode)
        return self._adapter().delete(key)

    def page_exists(self, code: str, lang: Optional[str] = None, branchcode: Branch = UNSET) -> bool:
        key = normalize_key(code, lang, branchcode)
        return self._adapter().exists(key)

    def get_page_url(self, code: str, branchcode: Branch = UNSET) -> str:
        """
        Return the OPAC URL of a page, e.g.
        /cgi-bin/koha/opac-page.pl?page_id=42

        The id is the page's own idnew on the unified layout but the
        PARENT additional_contents id on the split layout.
        """
        key = normalize_key(code, None, branchcode)
        return self._adapter().page_url(key)

    resolve_page_url = get_page_url


# ---------------------------------------------
# Module-level API on a default manager
# ---------------------------------------------

_default_manager: Optional[PageManager] = None
_default_lock = threading.Lock()


def get_default_manager(config: Optional[AppConfig] = None) -> PageManager:
    """Return the process-wide PageManager, connecting via config on first use."""
    global _default_manager
    if _default_manager is None:
        with _default_lock:
            if _default_manager is None:
                config = config or get_config()
                _default_manager = PageManager(MySQLClient.from_config(config.mysql))
    return _default_manager


def set_default_manager(manager: Optional[PageManager]) -> None:
    global _default_manager
    with _default_lock:
        _default_manager = manager


def create_page(code, title, content, lang=None, branchcode=None) -> int:
    return get_default_manager().create_page(code, title, content, lang=lang, branchcode=branchcode)


def update_page(code, lang=None, title=None, content=None, branchcode=UNSET) -> bool:
    return get_default_manager().update_page(code, lang=lang, title=title, content=content, branchcode=branchcode)


def delete_page(code, lang=None, branchcode=UNSET) -> bool:
    return get_default_manager().delete_page(code, lang=lang, branchcode=branchcode)


def page_exists(code, lang=None, branchcode=UNSET) -> bool:
    return get_default_manager().page_exists(code, lang=lang, branchcode=branchcode)


def get_page_url(code, branchcode=UNSET) -> str:
    return get_default_manager().get_page_url(code, branchcode=branchcode)


resolve_page_url = get_page_url

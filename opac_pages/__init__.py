# ==============================================
# OPAC Pages
# ==============================================
#
# Manage Koha "additional contents" pages on both the legacy
# single-table schema and the split schema of Koha >= 23.11.
#
# Package Structure:
#
# opac_pages/
# ├── identity.py     # Key normalization (code, lang, branchcode)
# ├── schema.py       # Schema probe, cached per process
# ├── adapters/       # Unified + split layout implementations
# ├── pages.py        # PageManager dispatch façade (public API)
# ├── storage/        # MySQL access (pymysql)
# ├── cache.py        # Process-wide memoization cache
# ├── i18n.py         # gettext catalog lookup
# ├── errors.py       # Exception hierarchy
# ├── config.py       # Configuration management
# └── cli.py          # Command line entry point
#
# ==============================================

from opac_pages.errors import (
    AlreadyExists,
    MissingIdentity,
    MissingParameter,
    NotFound,
    PagesError,
    PersistenceError,
    SchemaDetectionError,
)
from opac_pages.identity import DEFAULT_LANG, UNSET, PageKey, normalize_key
from opac_pages.pages import (
    PageManager,
    create_page,
    delete_page,
    get_page_url,
    page_exists,
    resolve_page_url,
    update_page,
)
from opac_pages.schema import Layout, SchemaProbe, detect_layout

__version__ = "1.2.0"

__all__ = [
    "AlreadyExists",
    "DEFAULT_LANG",
    "Layout",
    "MissingIdentity",
    "MissingParameter",
    "NotFound",
    "PageKey",
    "PageManager",
    "PagesError",
    "PersistenceError",
    "SchemaDetectionError",
    "SchemaProbe",
    "UNSET",
    "create_page",
    "delete_page",
    "detect_layout",
    "get_page_url",
    "normalize_key",
    "page_exists",
    "resolve_page_url",
    "update_page",
]

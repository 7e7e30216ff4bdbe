# ==============================================
# LAYOUT ADAPTERS
# ==============================================
#
# One implementation of the page operations per physical layout.
# Never used directly. PageManager picks one via the SchemaProbe.
#
# Modules:
# --------
# - base.py     → LayoutAdapter, shared constants, URL builder
# - unified.py  → single-table layout (Koha <= 22.11)
# - split.py    → parent + localizations layout (Koha >= 23.11)
#
# ==============================================

from .base import LayoutAdapter, OPAC_PAGE_VIEWER, PAGE_CATEGORY, PAGE_LOCATION, page_url_for
from .split import SplitLayoutAdapter
from .unified import UnifiedLayoutAdapter

__all__ = [
    "LayoutAdapter",
    "SplitLayoutAdapter",
    "UnifiedLayoutAdapter",
    "OPAC_PAGE_VIEWER",
    "PAGE_CATEGORY",
    "PAGE_LOCATION",
    "page_url_for",
]

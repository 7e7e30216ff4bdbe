# ==============================================
# Schema Probe
# ==============================================
#
# PURPOSE:
#   Decide which physical layout the Koha database uses for
#   additional contents, once per process.
#
#   UNIFIED ('legacy', Koha <= 22.11)
#     additional_contents: idnew, category, code, location,
#       branchcode, title, content, lang, published_on, number
#
#   SPLIT (Koha >= 23.11)
#     additional_contents: id, category, code, location,
#       branchcode, published_on, number
#     additional_contents_localizations: id,
#       additional_content_id, title, content, lang
#
# DETECTION:
# ----------
#   additional_contents missing              → SchemaDetectionError
#   additional_contents.lang present         → UNIFIED
#   localizations table present              → SPLIT
#   otherwise                                → SchemaDetectionError
#
#   The result is stored in the process-wide MemoryCache and never
#   invalidated: a schema upgrade requires a restart.
#
# ==============================================

import logging
import threading
from enum import Enum
from typing import Optional

import pymysql

from opac_pages.cache import MemoryCache
from opac_pages.errors import SchemaDetectionError

logger = logging.getLogger(__name__)

CONTENTS_TABLE = "additional_contents"
LOCALIZATIONS_TABLE = "additional_contents_localizations"
LAYOUT_MARKER_COLUMN = "lang"

CACHE_KEY = "pages:schema_layout"

# Serializes the first probe so concurrent callers issue one metadata query
_probe_lock = threading.Lock()


class Layout(Enum):
    """Physical table layout of additional contents."""
    UNIFIED = "legacy"
    SPLIT = "split"


class SchemaProbe:
    def __init__(self, db, cache: Optional[MemoryCache] = None):
        self._db = db
        self._cache = cache or MemoryCache.get_instance()

    def detect_layout(self) -> Layout:
        """
        Return the detected Layout, probing the database at most once.

        Raises:
            SchemaDetectionError: metadata unreachable or layout ambiguous.
        """
        layout = self._cache.get(CACHE_KEY)
        if layout is not None:
            return layout

        with _probe_lock:
            layout = self._cache.get(CACHE_KEY)
            if layout is None:
                layout = self._probe()
                self._cache.set(CACHE_KEY, layout)
                logger.info("Detected %s additional_contents layout", layout.value)
        return layout

    def _probe(self) -> Layout:
        try:
            columns = self._db.get_current_columns(CONTENTS_TABLE)
            if not columns:
                raise SchemaDetectionError(f"Table '{CONTENTS_TABLE}' not found")
            if LAYOUT_MARKER_COLUMN in columns:
                return Layout.UNIFIED
            if self._db.table_exists(LOCALIZATIONS_TABLE):
                return Layout.SPLIT
        except pymysql.MySQLError as e:
            raise SchemaDetectionError(f"Cannot read schema metadata: {e}") from e

        raise SchemaDetectionError(
            f"'{CONTENTS_TABLE}' has no '{LAYOUT_MARKER_COLUMN}' column "
            f"and '{LOCALIZATIONS_TABLE}' does not exist"
        )


def detect_layout(db, cache: Optional[MemoryCache] = None) -> Layout:
    """Shortcut for SchemaProbe(db, cache).detect_layout()."""
    return SchemaProbe(db, cache).detect_layout()

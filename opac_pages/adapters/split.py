# ==============================================
# SplitLayoutAdapter
# ==============================================
#
# PURPOSE:
#   Page operations for the split layout (Koha >= 23.11).
#
#   additional_contents                 one parent per (code, branchcode)
#     └── additional_contents_localizations   one child per lang
#
#   A parent without localizations must not persist:
#     - create inserts parent + child in one transaction; if the
#       child insert fails the new parent is rolled back with it.
#     - delete removes the child and, in the same transaction,
#       the parent once its last child is gone.
#
#   page_url embeds the PARENT id, unlike the unified layout.
#
# ==============================================

import logging
from typing import Any, Dict, List, Optional, Tuple

from opac_pages.adapters.base import LayoutAdapter, page_url_for
from opac_pages.errors import AlreadyExists, NotFound
from opac_pages.identity import PageKey
from opac_pages.schema import CONTENTS_TABLE, LOCALIZATIONS_TABLE

logger = logging.getLogger(__name__)

PARENT_ID = "id"
LOCALIZATION_ID = "id"
PARENT_FK = "additional_content_id"


class SplitLayoutAdapter(LayoutAdapter):

    # ---------------------------------------------
    # Lookups
    # ---------------------------------------------

    def _find_parents(self, key: PageKey) -> List[Dict[str, Any]]:
        # Branch filter only when the caller provided one (None → IS NULL)
        where = self._page_filter(key.code)
        where.update(key.branch_filter())
        return self._db.select(CONTENTS_TABLE, where, order_by=PARENT_ID)

    def _find_localization(self, parent_id: int, lang: str) -> Optional[Dict[str, Any]]:
        rows = self._db.select(
            LOCALIZATIONS_TABLE,
            {PARENT_FK: parent_id, "lang": lang},
            order_by=LOCALIZATION_ID,
            limit=1,
        )
        return rows[0] if rows else None

    def _find_page(self, key: PageKey) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """
        Locate (parent, localization) for key.

        Raises:
            NotFound: no parent for the code, or no localization in key.lang.
        """
        parents = self._find_parents(key)
        if not parents:
            logger.warning("Page with code '%s' not found", key.code)
            raise NotFound(f"Page with code '{key.code}' not found")

        for parent in parents:
            localization = self._find_localization(parent[PARENT_ID], key.lang)
            if localization is not None:
                return parent, localization

        logger.warning("Localization for code '%s' and lang '%s' not found", key.code, key.lang)
        raise NotFound(f"Localization for code '{key.code}' and lang '{key.lang}' not found")

    # ---------------------------------------------
    # Operations
    # ---------------------------------------------

    def create(self, key: PageKey, title: str, content: str) -> int:
        branchcode = key.branchcode if key.has_branch else None

        with self._db.transaction():
            where = self._page_filter(key.code)
            where["branchcode"] = branchcode
            parents = self._db.select(CONTENTS_TABLE, where, order_by=PARENT_ID, limit=1)

            if parents:
                parent_id = parents[0][PARENT_ID]
                if self._find_localization(parent_id, key.lang) is not None:
                    logger.warning("Page with %s already exists", key.describe())
                    raise AlreadyExists(f"Page with {key.describe()} already exists")
            else:
                row = self._publication_fields()
                row.update({"code": key.code, "branchcode": branchcode})
                parent_id = self._db.insert(CONTENTS_TABLE, row)
                logger.debug("Created additional_contents parent id=%s for '%s'", parent_id, key.code)

            localization_id = self._db.insert(LOCALIZATIONS_TABLE, {
                PARENT_FK: parent_id,
                "title": title,
                "content": content,
                "lang": key.lang,
            })

        logger.info(
            "Created OPAC page '%s' (%s), parent id=%s, localization id=%s",
            key.code, key.lang, parent_id, localization_id,
        )
        return localization_id

    def exists(self, key: PageKey) -> bool:
        for parent in self._find_parents(key):
            if self._find_localization(parent[PARENT_ID], key.lang) is not None:
                return True
        return False

    def update(self, key: PageKey, title: Optional[str] = None, content: Optional[str] = None) -> bool:
        _, localization = self._find_page(key)

        changes = self._changes(title, content)
        if changes:
            self._db.update(LOCALIZATIONS_TABLE, changes, {LOCALIZATION_ID: localization[LOCALIZATION_ID]})
        return True

    def delete(self, key: PageKey) -> bool:
        parent, localization = self._find_page(key)
        parent_id = parent[PARENT_ID]

        with self._db.transaction():
            self._db.delete(LOCALIZATIONS_TABLE, {LOCALIZATION_ID: localization[LOCALIZATION_ID]})
            if not self._db.count(LOCALIZATIONS_TABLE, {PARENT_FK: parent_id}):
                self._db.delete(CONTENTS_TABLE, {PARENT_ID: parent_id})
                logger.info("Removed empty additional_contents parent id=%s", parent_id)

        logger.info("Deleted OPAC page localization for %s", key.describe())
        return True

    def page_url(self, key: PageKey) -> str:
        parents = self._find_parents(key)
        if not parents:
            raise NotFound(f"Page with code '{key.code}' not found")
        return page_url_for(parents[0][PARENT_ID])

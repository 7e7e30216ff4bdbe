# ==============================================
# UnifiedLayoutAdapter
# ==============================================
#
# PURPOSE:
#   Page operations for the single-table layout (Koha <= 22.11).
#   One additional_contents row per (code, lang, branchcode)
#   holds identity, title and content. Primary key: idnew.
#
# ==============================================

import logging
from typing import Any, Dict, Optional

from opac_pages.adapters.base import LayoutAdapter, page_url_for
from opac_pages.errors import AlreadyExists, NotFound
from opac_pages.identity import PageKey
from opac_pages.schema import CONTENTS_TABLE

logger = logging.getLogger(__name__)

ID_COLUMN = "idnew"


class UnifiedLayoutAdapter(LayoutAdapter):

    def _key_filter(self, key: PageKey) -> Dict[str, Any]:
        where = self._page_filter(key.code)
        where["lang"] = key.lang
        where.update(key.branch_filter())
        return where

    def create(self, key: PageKey, title: str, content: str) -> int:
        # Creation always targets a concrete branch scope, UNSET means all libraries
        branchcode = key.branchcode if key.has_branch else None
        where = self._page_filter(key.code)
        where.update({"lang": key.lang, "branchcode": branchcode})

        if self._db.count(CONTENTS_TABLE, where) > 0:
            logger.warning("Page with %s already exists", key.describe())
            raise AlreadyExists(f"Page with {key.describe()} already exists")

        row = self._publication_fields()
        row.update({
            "code": key.code,
            "branchcode": branchcode,
            "title": title,
            "content": content,
            "lang": key.lang,
        })
        page_id = self._db.insert(CONTENTS_TABLE, row)
        logger.info("Created OPAC page '%s' (%s), idnew=%s", key.code, key.lang, page_id)
        return page_id

    def exists(self, key: PageKey) -> bool:
        return self._db.count(CONTENTS_TABLE, self._key_filter(key)) > 0

    def update(self, key: PageKey, title: Optional[str] = None, content: Optional[str] = None) -> bool:
        rows = self._db.select(CONTENTS_TABLE, self._key_filter(key), order_by=ID_COLUMN, limit=1)
        if not rows:
            logger.warning("Page with %s not found", key.describe())
            raise NotFound(f"Page with {key.describe()} not found")

        changes = self._changes(title, content)
        if changes:
            self._db.update(CONTENTS_TABLE, changes, {ID_COLUMN: rows[0][ID_COLUMN]})
        return True

    def delete(self, key: PageKey) -> bool:
        where = self._key_filter(key)
        if not self._db.count(CONTENTS_TABLE, where):
            logger.warning("Page with %s not found", key.describe())
            raise NotFound(f"Page with {key.describe()} not found")

        deleted = self._db.delete(CONTENTS_TABLE, where)
        logger.info("Deleted %d OPAC page row(s) for %s", deleted, key.describe())
        return True

    def page_url(self, key: PageKey) -> str:
        where = self._page_filter(key.code)
        where.update(key.branch_filter())
        rows = self._db.select(CONTENTS_TABLE, where, order_by=ID_COLUMN, limit=1)
        if not rows:
            raise NotFound(f"Page with code '{key.code}' not found")
        return page_url_for(rows[0][ID_COLUMN])

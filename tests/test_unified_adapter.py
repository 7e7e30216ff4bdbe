# ==============================================
# Tests for the Unified Layout Adapter
# ==============================================

import pytest

from conftest import TODAY
from opac_pages.adapters import UnifiedLayoutAdapter
from opac_pages.errors import AlreadyExists, NotFound, PersistenceError
from opac_pages.identity import normalize_key

TABLE = "additional_contents"


@pytest.fixture
def adapter(unified_db):
    return UnifiedLayoutAdapter(unified_db, clock=lambda: TODAY)


class TestCreate:

    def test_inserts_one_row_with_page_markers(self, adapter, unified_db):
        page_id = adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")

        rows = unified_db.rows(TABLE)
        assert len(rows) == 1
        row = rows[0]
        assert row["idnew"] == page_id
        assert row["category"] == "pages"
        assert row["location"] == "opac_only"
        assert row["number"] == 0
        assert row["published_on"] == "2024-05-01"
        assert (row["code"], row["lang"], row["branchcode"]) == ("help", "default", None)
        assert (row["title"], row["content"]) == ("Help", "<p>x</p>")

    def test_duplicate_identity_rejected(self, adapter, unified_db):
        key = normalize_key("help", branchcode=None)
        adapter.create(key, "Help", "<p>x</p>")
        before = unified_db.snapshot()

        with pytest.raises(AlreadyExists):
            adapter.create(key, "Other", "<p>y</p>")
        assert unified_db.snapshot() == before

    def test_same_code_other_language_allowed(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        adapter.create(normalize_key("help", "fr", None), "Aide", "<p>x</p>")
        assert len(unified_db.rows(TABLE)) == 2

    def test_same_code_other_branch_allowed(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        adapter.create(normalize_key("help", branchcode="CPL"), "Help CPL", "<p>x</p>")
        assert [row["branchcode"] for row in unified_db.rows(TABLE)] == [None, "CPL"]


class TestExists:

    def test_branch_absent_matches_any_branch(self, adapter):
        adapter.create(normalize_key("help", branchcode="CPL"), "Help", "<p>x</p>")
        assert adapter.exists(normalize_key("help"))

    def test_explicit_none_branch_matches_unrestricted_only(self, adapter):
        adapter.create(normalize_key("help", branchcode="CPL"), "Help", "<p>x</p>")
        assert not adapter.exists(normalize_key("help", branchcode=None))
        assert adapter.exists(normalize_key("help", branchcode="CPL"))

    def test_other_content_types_ignored(self, adapter, unified_db):
        unified_db.insert(TABLE, {
            "category": "news", "code": "help", "location": "opac_only", "lang": "default",
        })
        assert not adapter.exists(normalize_key("help"))


class TestUpdate:

    def test_only_content(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        assert adapter.update(normalize_key("help"), content="<p>y</p>") is True
        row = unified_db.rows(TABLE)[0]
        assert (row["title"], row["content"]) == ("Help", "<p>y</p>")

    def test_only_title(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        adapter.update(normalize_key("help"), title="Hilfe")
        row = unified_db.rows(TABLE)[0]
        assert (row["title"], row["content"]) == ("Hilfe", "<p>x</p>")

    def test_missing_page(self, adapter):
        with pytest.raises(NotFound):
            adapter.update(normalize_key("help"), title="Hilfe")

    def test_write_failure(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        unified_db.update_errors[TABLE] = PersistenceError("Failed to write", "Data too long")
        with pytest.raises(PersistenceError, match="Data too long"):
            adapter.update(normalize_key("help"), title="x" * 300)


class TestDelete:

    def test_removes_all_matching_rows(self, adapter, unified_db):
        adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        adapter.create(normalize_key("help", branchcode="CPL"), "Help", "<p>x</p>")
        adapter.create(normalize_key("help", "fr", None), "Aide", "<p>x</p>")

        assert adapter.delete(normalize_key("help")) is True
        assert [row["lang"] for row in unified_db.rows(TABLE)] == ["fr"]

    def test_missing_page(self, adapter):
        with pytest.raises(NotFound):
            adapter.delete(normalize_key("help"))


class TestPageUrl:

    def test_embeds_own_id(self, adapter):
        adapter.create(normalize_key("other", branchcode=None), "Other", "<p>o</p>")
        page_id = adapter.create(normalize_key("help", "fr", None), "Aide", "<p>x</p>")
        assert adapter.page_url(normalize_key("help")) == f"/cgi-bin/koha/opac-page.pl?page_id={page_id}"

    def test_first_match_wins(self, adapter):
        first = adapter.create(normalize_key("help", branchcode=None), "Help", "<p>x</p>")
        adapter.create(normalize_key("help", "fr", None), "Aide", "<p>x</p>")
        assert adapter.page_url(normalize_key("help")).endswith(f"page_id={first}")

    def test_missing_page(self, adapter):
        with pytest.raises(NotFound):
            adapter.page_url(normalize_key("help"))

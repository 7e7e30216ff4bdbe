# ==============================================
# Tests for the command line entry point
# ==============================================

import gettext

import pytest

from opac_pages.cli import build_parser, main
from opac_pages.config import reset_config
from opac_pages.i18n import I18N


class TestParser:

    def test_create_requires_title_and_content(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create", "help", "--title", "Help"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:

    def test_page_lifecycle(self, split_manager, split_db, capsys):
        assert main(["layout"], manager=split_manager) == 0
        assert capsys.readouterr().out.strip() == "split"

        assert main(["create", "help", "--title", "Help", "--content", "<p>x</p>"], manager=split_manager) == 0
        assert capsys.readouterr().out.strip() == "1"

        assert main(["exists", "help"], manager=split_manager) == 0
        assert main(["url", "help"], manager=split_manager) == 0
        assert capsys.readouterr().out.splitlines()[-1] == "/cgi-bin/koha/opac-page.pl?page_id=1"

        assert main(["update", "help", "--content", "<p>y</p>"], manager=split_manager) == 0
        assert split_db.rows("additional_contents_localizations")[0]["content"] == "<p>y</p>"

        assert main(["delete", "help"], manager=split_manager) == 0
        assert main(["exists", "help"], manager=split_manager) == 1

    def test_errors_reported_on_stderr(self, unified_manager, capsys):
        assert main(["delete", "help", "--lang", "fr"], manager=unified_manager) == 1
        assert "not found" in capsys.readouterr().err

    def test_empty_branchcode_creates_unrestricted_page(self, unified_manager, unified_db):
        argv = ["create", "help", "--title", "Help", "--content", "<p>x</p>", "--branchcode", ""]
        assert main(argv, manager=unified_manager) == 0
        assert unified_db.rows("additional_contents")[0]["branchcode"] is None

    def test_configures_catalog_from_environment(self, split_manager, monkeypatch):
        calls = []

        def translation(domain, localedir=None, languages=None):
            calls.append((domain, localedir, languages))
            return gettext.NullTranslations()

        monkeypatch.setattr(gettext, "translation", translation)
        monkeypatch.setattr(I18N, "textdomain", None)
        monkeypatch.setattr(I18N, "localedir", None)
        monkeypatch.setattr(I18N, "_translations", gettext.NullTranslations())
        monkeypatch.setenv("I18N_TEXTDOMAIN", "com.example.pages")
        monkeypatch.setenv("I18N_LOCALEDIR", "/srv/locale")
        monkeypatch.setenv("I18N_LANGUAGE", "de-DE")
        reset_config()
        try:
            assert main(["layout"], manager=split_manager) == 0
        finally:
            reset_config()

        assert calls == [("com.example.pages", "/srv/locale", ["de_DE"])]

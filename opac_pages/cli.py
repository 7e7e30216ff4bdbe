# ==============================================
# CLI — Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Manage OPAC pages from the shell, e.g. from plugin
#   install/uninstall scripts or when debugging a Koha instance.
#
# COMMANDS:
# ---------
#   opac-pages layout
#   opac-pages exists CODE [--lang LANG]
#   opac-pages url CODE
#   opac-pages create CODE --title T --content C [--lang L] [--branchcode B]
#   opac-pages update CODE [--lang L] [--title T] [--content C]
#   opac-pages delete CODE [--lang L]
#
#   Configuration comes from the environment / .env (see config.py),
#   including the I18N_LANGUAGE catalog used for translated messages.
#
#   Exit status 0 on success, 1 on any PagesError
#   (`exists` exits 1 when the page is missing).
#
# ==============================================

import argparse
import logging
import sys
from typing import Optional, Sequence

from opac_pages.config import get_config
from opac_pages.errors import PagesError
from opac_pages.i18n import I18N
from opac_pages.pages import PageManager
from opac_pages.storage import MySQLClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="opac-pages", description="Manage Koha OPAC pages")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("layout", help="Show the detected additional_contents layout")

    exists = sub.add_parser("exists", help="Check whether a page exists")
    exists.add_argument("code")
    exists.add_argument("--lang", default=None)

    url = sub.add_parser("url", help="Print the OPAC URL of a page")
    url.add_argument("code")

    create = sub.add_parser("create", help="Create a page")
    create.add_argument("code")
    create.add_argument("--title", required=True)
    create.add_argument("--content", required=True)
    create.add_argument("--lang", default=None)
    create.add_argument("--branchcode", default=None)

    update = sub.add_parser("update", help="Update title and/or content of a page")
    update.add_argument("code")
    update.add_argument("--lang", default=None)
    update.add_argument("--title", default=None)
    update.add_argument("--content", default=None)

    delete = sub.add_parser("delete", help="Delete a page localization")
    delete.add_argument("code")
    delete.add_argument("--lang", default=None)

    return parser


def run(manager: PageManager, args: argparse.Namespace) -> int:
    if args.command == "layout":
        print(manager.layout.value)
    elif args.command == "exists":
        found = manager.page_exists(args.code, lang=args.lang)
        print("yes" if found else "no")
        return 0 if found else 1
    elif args.command == "url":
        print(manager.get_page_url(args.code))
    elif args.command == "create":
        page_id = manager.create_page(
            args.code, args.title, args.content, lang=args.lang, branchcode=args.branchcode
        )
        print(page_id)
    elif args.command == "update":
        manager.update_page(args.code, lang=args.lang, title=args.title, content=args.content)
    elif args.command == "delete":
        manager.delete_page(args.code, lang=args.lang)
    return 0


def main(argv: Optional[Sequence[str]] = None, manager: Optional[PageManager] = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    I18N.configure(config.i18n)

    if manager is None:
        with MySQLClient.from_config(config.mysql) as db:
            return _run_reporting_errors(PageManager(db), args)
    return _run_reporting_errors(manager, args)


def _run_reporting_errors(manager: PageManager, args: argparse.Namespace) -> int:
    try:
        return run(manager, args)
    except PagesError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

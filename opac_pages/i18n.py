# ==============================================
# I18N — translation catalog lookup
# ==============================================
#
# PURPOSE:
#   Translate user-facing strings (page titles, page bodies a
#   plugin installs) through a gettext catalog, choosing the
#   locale from the current interface language tag.
#
# LOCALE NEGOTIATION:
# -------------------
#   "de-DE"       → "de_DE"
#   "zh-Hans-CN"  → "zh_CN"   (4-letter script subtag skipped)
#   "en"          → "en"
#
# FUNCTIONS:
# ----------
#   gettext_(msgid)
#   gettext_x(msgid, **vars)
#   ngettext_(msgid, msgid_plural, count)
#   ngettext_x(msgid, msgid_plural, count, **vars)
#   pgettext_(msgctxt, msgid)
#   pgettext_x(msgctxt, msgid, **vars)
#   npgettext_(msgctxt, msgid, msgid_plural, count)
#   npgettext_x(msgctxt, msgid, msgid_plural, count, **vars)
#   ngettext_xn                → alias of ngettext_x
#   N_ / N_n / N_p / N_np    → mark for extraction, no lookup
#
#   `*_x` variants replace {name} placeholders; placeholders with
#   no value (or a None value) are left untouched.
#   Leading arguments are positional-only, so a placeholder may be
#   named like one of them, e.g. gettext_x("Use {msgid}", msgid="x").
#
#   Until I18N.init() runs with a language tag every lookup returns
#   the msgid unchanged. Only an init() call loads and caches a catalog.
#
# ==============================================

import gettext
import logging
import re
from pathlib import Path
from typing import Any, Optional

from opac_pages.cache import MemoryCache

logger = logging.getLogger(__name__)

CACHE_KEY = "i18n:plugin:initialized"
SCRIPT_SUBTAG_LENGTH = 4
DEFAULT_LOCALEDIR = Path(__file__).parent / "locale"

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def negotiate_locale(langtag: Optional[str]) -> Optional[str]:
    """Convert a BCP 47 style language tag into a gettext locale name."""
    if not langtag:
        return None
    subtags = langtag.replace("_", "-").split("-")
    language = subtags[0].lower()
    region = subtags[1] if len(subtags) > 1 else None
    if region and len(region) == SCRIPT_SUBTAG_LENGTH:
        region = subtags[2] if len(subtags) > 2 else None
    if region:
        return f"{language}_{region.upper()}"
    return language


def expand(text: str, /, **variables: Any) -> str:
    """Replace {name} placeholders with values from variables."""
    if not variables:
        return text

    def _replace(match):
        value = variables.get(match.group(1))
        return match.group(0) if value is None else str(value)

    return _PLACEHOLDER.sub(_replace, text)


class I18N:
    """
    Process-wide translation catalog.

    Usage:
        I18N("com.lmscloud.pages", "/path/to/locale").init("de-DE")
        gettext_x("Hello {name}", name="Ada")
    """

    textdomain: Optional[str] = None
    localedir: Optional[str] = None
    _translations: gettext.NullTranslations = gettext.NullTranslations()

    def __init__(self, textdomain: str, localedir: Optional[str] = None):
        I18N.textdomain = textdomain
        I18N.localedir = str(localedir or DEFAULT_LOCALEDIR)

    @classmethod
    def init(cls, langtag: Optional[str] = None, cache: Optional[MemoryCache] = None) -> Optional[str]:
        """
        Load the catalog for langtag once per process.
        Without a langtag nothing is loaded or cached, so a later call
        with a tag still takes effect.

        Returns:
            The negotiated locale, or None when no catalog could be loaded.
        """
        cache = cache or MemoryCache.get_instance()
        if cache.get(CACHE_KEY):
            return cache.get(CACHE_KEY + ":locale")
        if not langtag:
            return None

        locale = negotiate_locale(langtag)
        cls._translations = gettext.NullTranslations()
        if cls.textdomain and locale:
            try:
                cls._translations = gettext.translation(
                    cls.textdomain, localedir=cls.localedir, languages=[locale]
                )
            except OSError:
                logger.warning(
                    "No catalog for '%s' in %s. Localization is disabled", locale, cls.localedir
                )
                locale = None
        else:
            locale = None

        cache.set(CACHE_KEY, True)
        cache.set(CACHE_KEY + ":locale", locale)
        return locale

    @classmethod
    def configure(cls, config, cache: Optional[MemoryCache] = None) -> Optional[str]:
        """Set up the catalog from an I18NConfig and load its language."""
        cls(config.textdomain, config.localedir)
        return cls.init(config.language, cache=cache)

    @classmethod
    def translations(cls) -> gettext.NullTranslations:
        # Lookups never trigger init(), a tag-less init would be cached for good
        return cls._translations


def gettext_(msgid: str) -> str:
    return I18N.translations().gettext(msgid)


def gettext_x(msgid: str, /, **variables: Any) -> str:
    return expand(gettext_(msgid), **variables)


def ngettext_(msgid: str, msgid_plural: str, count: int) -> str:
    return I18N.translations().ngettext(msgid, msgid_plural, count)


def ngettext_x(msgid: str, msgid_plural: str, count: int, /, **variables: Any) -> str:
    return expand(ngettext_(msgid, msgid_plural, count), **variables)


ngettext_xn = ngettext_x


def pgettext_(msgctxt: str, msgid: str) -> str:
    return I18N.translations().pgettext(msgctxt, msgid)


def pgettext_x(msgctxt: str, msgid: str, /, **variables: Any) -> str:
    return expand(pgettext_(msgctxt, msgid), **variables)


def npgettext_(msgctxt: str, msgid: str, msgid_plural: str, count: int) -> str:
    return I18N.translations().npgettext(msgctxt, msgid, msgid_plural, count)


def npgettext_x(msgctxt: str, msgid: str, msgid_plural: str, count: int, /, **variables: Any) -> str:
    return expand(npgettext_(msgctxt, msgid, msgid_plural, count), **variables)


def N_(msgid: str) -> str:
    return msgid


def N_n(msgid: str, msgid_plural: str) -> str:
    return msgid


def N_p(msgctxt: str, msgid: str) -> str:
    return msgid


def N_np(msgctxt: str, msgid: str, msgid_plural: str) -> str:
    return msgid

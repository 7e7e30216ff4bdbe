# ==============================================
# Key Normalization
# ==============================================
#
# PURPOSE:
#   Turn caller-supplied identity fields into a canonical PageKey
#   so both layout adapters agree on what "the same page" means.
#
# RULES:
# ------
#   - code        mandatory, None or "" raises MissingIdentity
#   - lang        None → DEFAULT_LANG ("default")
#   - branchcode  three states:
#       UNSET     → not provided, match any branch
#       None, ""  → pages without a branch restriction (IS NULL)
#       "CPL"     → that branch only
#
# ==============================================

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from opac_pages.errors import MissingIdentity, MissingParameter

DEFAULT_LANG = "default"


class _Unset:
    """Marker for "argument not provided". Falsy, compares by identity."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):
        return (_Unset, ())


UNSET: Any = _Unset()

Branch = Union[None, str, _Unset]


@dataclass(frozen=True)
class PageKey:
    """Canonical identity of a page: (code, lang, branchcode)."""
    code: str
    lang: str = DEFAULT_LANG
    branchcode: Branch = UNSET

    @property
    def has_branch(self) -> bool:
        return self.branchcode is not UNSET

    def branch_filter(self) -> Dict[str, Optional[str]]:
        # Empty dict means "any branch"; {"branchcode": None} becomes IS NULL
        if self.branchcode is UNSET:
            return {}
        return {"branchcode": self.branchcode}

    def describe(self) -> str:
        text = f"code '{self.code}' and lang '{self.lang}'"
        if self.has_branch:
            text += f" and branchcode '{self.branchcode}'"
        return text


def normalize_key(code: Optional[str], lang: Optional[str] = None, branchcode: Branch = UNSET) -> PageKey:
    """
    Build the canonical PageKey for an operation.

    Args:
        code: Unique page code, required.
        lang: Language code, defaults to DEFAULT_LANG.
        branchcode: Library code, None or "" for "all libraries", UNSET
            for "don't filter on branch".

    Raises:
        MissingIdentity: code is None or empty.
    """
    if not code:
        raise MissingIdentity("code")
    if lang is None:
        lang = DEFAULT_LANG
    if branchcode == "":
        branchcode = None
    return PageKey(code=code, lang=lang, branchcode=branchcode)


def require_fields(**fields: Any) -> None:
    """Raise MissingParameter for the first field that is None or empty."""
    for name, value in fields.items():
        if value is None or value == "":
            raise MissingParameter(name)

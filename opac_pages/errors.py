# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Every failure the page API can report. Callers catch
#   PagesError for "anything went wrong" or one of the
#   subclasses for the recoverable cases.
#
# HIERARCHY:
# ----------
#   PagesError
#   ├── MissingParameter         → required caller field empty
#   │   └── MissingIdentity      → `code` empty (fatal to the call)
#   ├── AlreadyExists            → create collided, nothing changed
#   ├── NotFound                 → page / localization does not exist
#   ├── PersistenceError         → store rejected a write
#   └── SchemaDetectionError     → layout could not be determined
#
# ==============================================

from typing import Optional


class PagesError(Exception):
    """Base class for all page management errors."""


class MissingParameter(PagesError):
    """A required parameter was not supplied (or was empty)."""

    def __init__(self, name: str):
        super().__init__(f"{name} parameter is required")
        self.name = name


class MissingIdentity(MissingParameter):
    """The identifying `code` was not supplied."""

    def __init__(self, name: str = "code"):
        super().__init__(name)


class AlreadyExists(PagesError):
    """A page with the same identity is already stored."""


class NotFound(PagesError):
    """The targeted page or localization does not exist."""


class PersistenceError(PagesError):
    """
    The relational store rejected a write.

    `detail` holds the driver's diagnostic message; the original
    driver exception is chained as __cause__.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.detail = detail


class SchemaDetectionError(PagesError):
    """The table layout could not be determined. Not recoverable."""

"""Exception taxonomy for folio.

Library code raises these; only :mod:`folio.cli` turns them into exit codes.
"""

from __future__ import annotations


class FolioError(Exception):
    """Base class for every error folio reports to the user."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class InvalidDate(FolioError, ValueError):
    """A date string is not a real ``YYYY-MM-DD`` calendar date."""


class MissingTitle(FolioError):
    """A record would end up without a title."""


class OrdinalExhausted(FolioError):
    """A day directory already holds 99 records."""


class PathCollision(FolioError):
    """The computed record directory already exists."""


class ContentRootMissing(FolioError):
    """The site has no ``content/`` directory."""


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class RecordNotFound(FolioError):
    """No record file matches the given path, directory, or URL."""


class MissingFrontmatter(FolioError):
    """A record file has no delimited metadata block."""

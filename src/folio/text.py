"""Slug, tag, and date normalisation helpers."""

from __future__ import annotations

import logging
import re
from datetime import date

from folio.errors import InvalidDate

logger = logging.getLogger(__name__)

MAX_SLUG_LENGTH = 80

# Straight, backtick, and curly quote characters are dropped before slugging
_QUOTES_RE = re.compile(r"[\"'`‘’“”]")
_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")
_TAG_SEPARATOR_RE = re.compile(r"[_\s]+")
_NON_TAG_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def slugify(text: str) -> str:
    """Return a URL-safe ``[a-z0-9-]`` token for *text* (may be empty)."""
    value = _QUOTES_RE.sub("", text.lower())
    value = _NON_SLUG_RE.sub("-", value).strip("-")
    return _HYPHEN_RUN_RE.sub("-", value)


def normalize_tag(text: str) -> str:
    """Normalise a single free-text tag to ``lower-hyphen-case``."""
    value = _TAG_SEPARATOR_RE.sub("-", text.strip().lower())
    value = _NON_TAG_RE.sub("", value)
    value = _HYPHEN_RUN_RE.sub("-", value)
    return value.strip("-")


def parse_tags_input(text: str) -> list[str]:
    """Split comma-separated tag input into normalised, de-duped tags."""
    tags = (normalize_tag(part) for part in text.split(","))
    return list(dict.fromkeys(t for t in tags if t))


def truncate_slug(slug: str, limit: int = MAX_SLUG_LENGTH) -> str:
    if len(slug) <= limit:
        return slug
    logger.warning("Slug trimmed to %d characters.", limit)
    return slug[:limit].rstrip("-")


def pad2(value: int) -> str:
    return f"{value:02d}"


def parse_calendar_date(text: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a :class:`~datetime.date`.

    Impossible combinations such as ``2024-02-30`` are rejected rather than
    clamped.  Raises :class:`~folio.errors.InvalidDate` on any mismatch.
    """
    match = _DATE_RE.match(text.strip())
    if not match:
        raise InvalidDate(f"Invalid date {text!r}. Use YYYY-MM-DD.")
    year, month, day = (int(g) for g in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError as exc:
        raise InvalidDate(f"Invalid date {text!r}: {exc}.") from exc
    if (parsed.year, parsed.month, parsed.day) != (year, month, day):
        raise InvalidDate(f"Invalid date {text!r}.")
    return parsed

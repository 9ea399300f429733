"""Core Record dataclass and status handling."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from folio.frontmatter import Frontmatter, decode, encode, quote

logger = logging.getLogger(__name__)

STATUS_VALUES = ("draft", "review", "published", "archived")
DEFAULT_STATUS = "draft"


def coerce_status(value: str | None) -> str:
    """Lower-case *value*; anything outside :data:`STATUS_VALUES` becomes draft."""
    status = (value or "").strip().lower()
    if not status:
        return DEFAULT_STATUS
    if status not in STATUS_VALUES:
        logger.warning("Invalid status %r. Using %s.", value, DEFAULT_STATUS)
        return DEFAULT_STATUS
    return status


@dataclass
class Record:
    """A single article: metadata fields plus the untouched body."""

    path: Path
    title: str
    status: str = DEFAULT_STATUS
    series: str = ""
    summary: str = ""
    tags: list[str] = field(default_factory=list)
    body: str = ""

    @classmethod
    def from_frontmatter(cls, path: Path, fm: Frontmatter, body: str) -> "Record":
        return cls(
            path=path,
            title=fm.get("title"),
            status=fm.get("status"),
            series=fm.get("series"),
            summary=fm.get("summary"),
            tags=fm.tags,
            body=body,
        )


def load_record(path: Path) -> Record:
    """Read *path* strictly; raises :class:`~folio.errors.MissingFrontmatter`."""
    block, body = decode(path.read_text(encoding="utf-8"))
    return Record.from_frontmatter(path, Frontmatter.parse(block), body)


def render_new_record(record: Record, author: str) -> str:
    """Return the full text of a freshly created record file."""
    fm = Frontmatter()
    fm.set("title", f"title: {quote(record.title)}")
    fm.set("status", f"status: {record.status}")
    if record.series:
        fm.set("series", f"series: {record.series}")
    if record.summary:
        fm.set("summary", f"summary: {quote(record.summary)}")
    fm.set_tags(record.tags)
    return encode(fm.render(), f"# {record.title}\nBy {author}\n\n")

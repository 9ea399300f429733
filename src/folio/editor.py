"""Creating and editing records on disk.

Both operations validate everything first and then write exactly one file
in a single call, so a failure never leaves a half-written record behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable

from folio.addressing import build_path, compute_ordinal, day_directory, resolve
from folio.config import DEFAULT_AUTHOR, SiteConfig
from folio.errors import ContentRootMissing, MissingTitle, PathCollision, RecordNotFound
from folio.frontmatter import Frontmatter, decode, encode, quote
from folio.record import DEFAULT_STATUS, Record, coerce_status, load_record, render_new_record
from folio.text import normalize_tag, parse_tags_input, slugify, truncate_slug

logger = logging.getLogger(__name__)

#: Field value meaning "remove this field" when editing
CLEAR = "-"
DEFAULT_SLUG = "new-article"

TagsInput = str | Iterable[str]


def _normalize_tags(tags: TagsInput) -> list[str]:
    if isinstance(tags, str):
        return parse_tags_input(tags)
    cleaned = (normalize_tag(t) for t in tags)
    return list(dict.fromkeys(t for t in cleaned if t))


def _require_content_root(site: SiteConfig) -> None:
    if not site.content_root.is_dir():
        raise ContentRootMissing(f"Missing {site.content_root}. Run setup first.")


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


@dataclass
class NewRecord:
    title: str
    day: date | None = None
    slug: str = ""
    status: str = DEFAULT_STATUS
    summary: str = ""
    series: str = ""
    #: Comma-separated text or an iterable of raw tags
    tags: TagsInput = ""


def create_record(site: SiteConfig, new: NewRecord) -> Path:
    """Create a new record under ``content/YYYY/MM/DD/NN-slug/`` and return its path."""
    _require_content_root(site)

    title = new.title.strip()
    if not title:
        raise MissingTitle("Title is required.")

    slug = slugify(new.slug) or slugify(title) or DEFAULT_SLUG
    slug = truncate_slug(slug)
    day = new.day or date.today()

    ordinal = compute_ordinal(day_directory(site.content_root, day))
    path = build_path(site.content_root, day, ordinal, slug)

    record = Record(
        path=path,
        title=title,
        status=coerce_status(new.status),
        series=new.series.strip(),
        summary=new.summary.strip(),
        tags=_normalize_tags(new.tags),
    )
    text = render_new_record(record, site.author or DEFAULT_AUTHOR)

    try:
        path.parent.mkdir(parents=True)
    except FileExistsError as exc:
        raise PathCollision(f"Article folder already exists: {path.parent}") from exc
    path.write_text(text, encoding="utf-8")
    logger.info("Created %s", path)
    return path


# ---------------------------------------------------------------------------
# Edit
# ---------------------------------------------------------------------------


@dataclass
class FieldEdits:
    """Requested changes; ``None`` (or blank) keeps the stored value.

    ``series``, ``summary`` and ``tags`` accept :data:`CLEAR` to remove the
    field.
    """

    title: str | None = None
    status: str | None = None
    series: str | None = None
    summary: str | None = None
    tags: TagsInput | None = None


def _supplied(value: str | None) -> bool:
    return value is not None and bool(value.strip())


def apply_edits(fm: Frontmatter, edits: FieldEdits) -> None:
    """Apply *edits* to *fm* in place, touching only the fields supplied."""
    if _supplied(edits.title):
        fm.set("title", f"title: {quote(edits.title.strip())}")
    if not fm.get("title"):
        raise MissingTitle("Title is required.")

    if _supplied(edits.status):
        fm.set("status", f"status: {coerce_status(edits.status)}")

    if _supplied(edits.series):
        series = edits.series.strip()
        if series == CLEAR:
            fm.remove("series")
        else:
            fm.set("series", f"series: {series}")

    if _supplied(edits.summary):
        summary = edits.summary.strip()
        if summary == CLEAR:
            fm.remove("summary")
        else:
            fm.set("summary", f"summary: {quote(summary)}")

    tags = edits.tags
    if isinstance(tags, str):
        if tags.strip() == CLEAR:
            fm.set_tags([])
        elif tags.strip():
            fm.set_tags(parse_tags_input(tags))
    elif tags is not None:
        fm.set_tags(_normalize_tags(tags))


def edit_record(
    site: SiteConfig,
    target: str,
    edits: FieldEdits | None = None,
    new_body: str | None = None,
) -> Path:
    """Apply *edits* (and optionally a new body) to the record *target* names.

    *target* may be a file path, a record directory, or a published URL.
    The file is rewritten in full; nothing is written if validation fails.
    """
    path = resolve(target, site)
    if path is None:
        raise RecordNotFound(
            f"Article file not found: {target!r}. Provide a path under {site.content_dirname}/ or a published URL."
        )

    block, body = decode(path.read_text(encoding="utf-8"))
    fm = Frontmatter.parse(block)
    apply_edits(fm, edits or FieldEdits())

    if new_body is not None and new_body.strip():
        body = new_body.rstrip() + "\n"

    path.write_text(encode(fm.render(), body), encoding="utf-8")
    logger.info("Updated %s", path)
    return path


def read_record(site: SiteConfig, target: str) -> Record:
    """Resolve and strictly load a record, for callers that prompt from it."""
    path = resolve(target, site)
    if path is None:
        raise RecordNotFound(f"Article file not found: {target!r}.")
    return load_record(path)

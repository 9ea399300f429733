"""CollectionIndex: in-memory summaries of every record, rebuilt per query."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from folio.addressing import RECORD_FILENAME
from folio.errors import MissingFrontmatter
from folio.frontmatter import Frontmatter, decode

logger = logging.getLogger(__name__)


@dataclass
class IndexEntry:
    """Lightweight, read-only summary of one record."""

    path: Path
    relative_path: str
    title: str = ""
    status: str = ""
    series: str = ""
    summary: str = ""
    tags: list[str] = field(default_factory=list)

    @property
    def search_text(self) -> str:
        return " ".join(
            [self.title, self.summary, self.series, " ".join(self.tags), self.relative_path]
        ).lower()

    def matches(self, query: str, status: str | None = None) -> bool:
        if status and self.status.lower() != status.strip().lower():
            return False
        return query.lower() in self.search_text

    def format(self) -> str:
        status = f" | status: {self.status}" if self.status else ""
        series = f" | series: {self.series}" if self.series else ""
        tags = f" | tags: {', '.join(self.tags)}" if self.tags else ""
        return f"{self.title or 'Untitled'}\n  {self.relative_path}{status}{series}{tags}"


def read_entry(path: Path, base_dir: Path) -> IndexEntry:
    """Summarise *path*; missing or broken frontmatter yields empty fields."""
    entry = IndexEntry(path=path, relative_path=path.relative_to(base_dir).as_posix())
    try:
        block, _body = decode(path.read_text(encoding="utf-8", errors="replace"))
    except MissingFrontmatter:
        logger.debug("No frontmatter in %s", path)
        return entry
    fm = Frontmatter.parse(block)
    entry.title = fm.get("title")
    entry.status = fm.get("status")
    entry.series = fm.get("series")
    entry.summary = fm.get("summary")
    entry.tags = fm.tags
    return entry


class CollectionIndex:
    """Scans a content directory and answers substring searches."""

    def __init__(self, content_root: Path, base_dir: Path | None = None) -> None:
        self.content_root = Path(content_root)
        #: Directory that relative paths are reported against (the site root)
        self.base_dir = Path(base_dir) if base_dir is not None else self.content_root.parent
        self.entries: list[IndexEntry] = []

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def record_paths(self) -> list[Path]:
        """Every record file under the content root, skipping hidden directories."""
        if not self.content_root.is_dir():
            return []
        paths = []
        for path in self.content_root.rglob(RECORD_FILENAME):
            rel = path.relative_to(self.content_root)
            if any(part.startswith(".") for part in rel.parts):
                continue
            if path.is_file():
                paths.append(path)
        return sorted(paths)

    def build(self) -> None:
        """(Re-)scan the content root and rebuild all entries."""
        self.entries = [read_entry(p, self.base_dir) for p in self.record_paths()]
        logger.debug("Indexed %d records under %s", len(self.entries), self.content_root)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def search(self, query: str, status: str | None = None) -> list[IndexEntry]:
        """Case-insensitive substring search, newest paths first."""
        hits = [e for e in self.entries if e.matches(query, status)]
        hits.sort(key=lambda e: e.relative_path, reverse=True)
        return hits


def search(
    content_root: Path,
    query: str,
    status: str | None = None,
    limit: int = 0,
    base_dir: Path | None = None,
) -> list[IndexEntry]:
    """Scan *content_root* afresh and return matching entries.

    A positive *limit* truncates the result; zero means unbounded.
    """
    index = CollectionIndex(content_root, base_dir)
    index.build()
    hits = index.search(query, status)
    return hits[:limit] if limit > 0 else hits

"""Content addressing: where records live and how to find them again.

Layout::

    content/
      2024/
        03/
          05/
            01-hello-world/article.md
            02-hello-world/article.md

Paths sort lexicographically by creation date and same-day ordinal.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from urllib.parse import unquote, urlparse

from folio.config import SiteConfig
from folio.errors import OrdinalExhausted, PathCollision
from folio.text import pad2

RECORD_FILENAME = "article.md"
MAX_ORDINAL = 99

# Leaf directory name: "NN-slug"
_ORDINAL_DIR_RE = re.compile(r"^(\d{2})-")
# Published URL path rooted at the date prefix: /YYYY/MM/DD/NN-slug/
_DATED_URL_RE = re.compile(r"^/?\d{4}/\d{2}/\d{2}/\d{2}-")
_CONTENT_MARKER = "/content/"


def day_directory(content_root: Path, day: date) -> Path:
    return content_root / str(day.year) / pad2(day.month) / pad2(day.day)


def compute_ordinal(day_dir: Path) -> int:
    """Return the next same-day ordinal (``max + 1``; gaps are never reused)."""
    ordinals: list[int] = []
    if day_dir.is_dir():
        for child in day_dir.iterdir():
            m = _ORDINAL_DIR_RE.match(child.name)
            if m and child.is_dir():
                ordinals.append(int(m.group(1)))
    ordinal = max(ordinals, default=0) + 1
    if ordinal > MAX_ORDINAL:
        raise OrdinalExhausted(f"Too many articles for this date (ordinal exceeds {MAX_ORDINAL}).")
    return ordinal


def build_path(content_root: Path, day: date, ordinal: int, slug: str) -> Path:
    """Return the record file path for a new record; never an existing one."""
    article_dir = day_directory(content_root, day) / f"{pad2(ordinal)}-{slug}"
    if article_dir.exists():
        raise PathCollision(f"Article folder already exists: {article_dir}")
    return article_dir / RECORD_FILENAME


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_from_url(url: str, content_root: Path) -> Path | None:
    """Map a published URL back to a record path under *content_root*.

    A literal ``/content/`` segment wins over the bare date prefix when a
    URL carries both.
    """
    pathname = unquote(urlparse(url).path or "")
    if not pathname:
        return None
    if _CONTENT_MARKER in pathname:
        rel = pathname.split(_CONTENT_MARKER)[1]
    elif _DATED_URL_RE.match(pathname):
        rel = pathname.lstrip("/")
    else:
        return None
    rel = rel.strip("/")
    if not rel:
        return None
    if not rel.endswith(RECORD_FILENAME):
        rel = f"{rel}/{RECORD_FILENAME}"
    return content_root / rel


def resolve(target: str, site: SiteConfig) -> Path | None:
    """Resolve a file path, directory, or published URL to a record file.

    Relative paths are tried against the site root, then the content root.
    Returns ``None`` when nothing on disk matches.
    """
    target = (target or "").strip()
    if not target:
        return None

    candidate = Path(target)
    if target.startswith(("http://", "https://")):
        from_url = resolve_from_url(target, site.content_root)
        if from_url is not None:
            candidate = from_url

    if not candidate.is_absolute():
        candidate = site.root / candidate
    if not candidate.exists():
        alt = site.content_root / target
        if alt.exists():
            candidate = alt
    if candidate.is_dir():
        candidate = candidate / RECORD_FILENAME
    return candidate if candidate.is_file() else None

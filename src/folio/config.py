"""Site configuration.

Every folio entry point takes a :class:`SiteConfig` instead of reading the
process working directory, so several sites can be handled side by side (in
tests, for example).

Environment variables (used only by :meth:`SiteConfig.from_env`; an explicit
root takes precedence):
    FOLIO_ROOT   – site root holding the ``content/`` directory
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONTENT_DIRNAME = "content"
SITE_FILENAME = "site.json"
DEFAULT_AUTHOR = "Your Name"


@dataclass(frozen=True)
class SiteConfig:
    """Location of a site and the read-only settings it carries."""

    root: Path
    content_dirname: str = CONTENT_DIRNAME

    @classmethod
    def from_env(cls, root: Path | str | None = None) -> "SiteConfig":
        value = root or os.getenv("FOLIO_ROOT") or Path.cwd()
        return cls(Path(value).expanduser().resolve())

    @property
    def content_root(self) -> Path:
        return self.root / self.content_dirname

    @property
    def site_file(self) -> Path:
        return self.content_root / SITE_FILENAME

    def load_site(self) -> dict[str, Any]:
        """Return the site mapping, or ``{}`` when it is absent or unreadable."""
        if not self.site_file.is_file():
            return {}
        try:
            data = json.loads(self.site_file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.debug("Ignoring unreadable site file %s: %s", self.site_file, exc)
            return {}
        return data if isinstance(data, dict) else {}

    @property
    def author(self) -> str:
        author = self.load_site().get("author")
        return author if isinstance(author, str) else ""

"""Shared fixtures for folio tests."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from folio.config import SiteConfig


def write_record(site: SiteConfig, rel_dir: str, content: str) -> Path:
    """Write ``content/<rel_dir>/article.md`` and return its path."""
    path = site.content_root / rel_dir / "article.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class ScriptedInput:
    """Interactive provider that replays canned answers per question prefix."""

    interactive = True

    def __init__(self, answers: dict[str, list[str]]) -> None:
        self.answers = {k: list(v) for k, v in answers.items()}
        self.asked: list[str] = []

    def ask(self, question: str, default: str = "") -> str:
        self.asked.append(question)
        for prefix, queue in self.answers.items():
            if question.startswith(prefix) and queue:
                return queue.pop(0).strip() or default
        return default


@pytest.fixture()
def site(tmp_path: Path) -> SiteConfig:
    """Site root with an empty ``content/`` directory."""
    (tmp_path / "content").mkdir()
    return SiteConfig(tmp_path)


@pytest.fixture()
def write(site: SiteConfig):
    """``write(rel_dir, content)`` helper bound to the ``site`` fixture."""

    def _write(rel_dir: str, content: str) -> Path:
        return write_record(site, rel_dir, content)

    return _write


@pytest.fixture()
def scripted():
    return ScriptedInput

"""Frontmatter codec for record files.

A record file looks like::

    ---
    title: "Hello World"
    status: draft
    series: getting-started
    tags:
      - python
      - notes
    ---
    # Hello World
    ...

Only the syntax folio itself writes is understood: single-line ``key: value``
scalars and one flat ``tags:`` list.  There is deliberately no YAML parser
here.  Instead the block is read into an ordered list of entries
(:class:`Frontmatter`), edited in memory, and rendered back.  Lines that are
not touched are re-emitted byte for byte, so ``encode(*decode(text))``
reproduces *text* exactly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from folio.errors import MissingFrontmatter

TAGS_KEY = "tags"

# Opening ``---`` line, metadata lines, terminating ``---`` line
_DOCUMENT_RE = re.compile(r"\A---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|\Z)", re.DOTALL)
# ``  - value`` item lines following a ``tags:`` header
_TAG_ITEM_RE = re.compile(r"^[ \t]*-")
_TAG_ITEM_PREFIX_RE = re.compile(r"^\s*-\s*")
_ESCAPE_RE = re.compile(r"\\([\"\\])")
_BLANK_RUN_RE = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------------
# Document split / join
# ---------------------------------------------------------------------------


def decode(raw: str) -> tuple[str, str]:
    """Split *raw* into ``(metadata_block, body)``.

    Raises :class:`~folio.errors.MissingFrontmatter` when the text does not
    open with a ``---`` line or never closes the block.
    """
    match = _DOCUMENT_RE.match(raw)
    if not match:
        raise MissingFrontmatter("Missing frontmatter in article.")
    return match.group(1) or "", raw[match.end() :]


def collapse_blank_lines(block: str) -> str:
    """Squash runs of two or more blank lines down to a single blank line."""
    return _BLANK_RUN_RE.sub("\n\n", block)


def encode(block: str, body: str) -> str:
    """Reassemble a full record document from a metadata block and body."""
    block = collapse_blank_lines(block).strip()
    if not block:
        return f"---\n---\n{body}"
    return f"---\n{block}\n---\n{body}"


# ---------------------------------------------------------------------------
# Scalar values
# ---------------------------------------------------------------------------


def quote(value: str) -> str:
    """Double-quote *value*, escaping backslashes and double quotes."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def strip_quotes(value: str) -> str:
    """Remove one layer of matching ``"…"`` or ``'…'`` quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPE_RE.sub(r"\1", value[1:-1])
    if len(value) >= 2 and value[0] == value[-1] == "'":
        return value[1:-1].replace("''", "'")
    return value


def _line_key_matches(raw: str, key: str) -> bool:
    return raw.startswith(f"{key}:")


def _line_value(raw: str) -> str:
    return raw.split(":", 1)[1].strip()


# ---------------------------------------------------------------------------
# In-memory model
# ---------------------------------------------------------------------------


@dataclass
class _Line:
    raw: str


@dataclass
class _TagBlock:
    header: str
    items: list[str] = field(default_factory=list)

    def lines(self) -> list[str]:
        return [self.header, *self.items]

    def values(self) -> list[str]:
        values = [strip_quotes(_TAG_ITEM_PREFIX_RE.sub("", item)) for item in self.items]
        values = [v for v in values if v]
        if values:
            return values
        # Inline forms: ``tags: [a, b]`` or ``tags: a, b``
        inline = _line_value(self.header)
        if inline.startswith("[") and inline.endswith("]"):
            inline = inline[1:-1]
        parts = (strip_quotes(p) for p in inline.split(","))
        return [p for p in parts if p]


class Frontmatter:
    """Ordered, line-preserving model of a metadata block."""

    def __init__(self, entries: list[_Line | _TagBlock] | None = None) -> None:
        self._entries: list[_Line | _TagBlock] = entries or []

    @classmethod
    def parse(cls, block: str) -> "Frontmatter":
        entries: list[_Line | _TagBlock] = []
        tag_block: _TagBlock | None = None
        for raw in block.split("\n"):
            if tag_block is not None and _TAG_ITEM_RE.match(raw):
                tag_block.items.append(raw)
                continue
            if tag_block is not None:
                entries.append(tag_block)
                tag_block = None
            if _line_key_matches(raw, TAGS_KEY) and not any(isinstance(e, _TagBlock) for e in entries):
                tag_block = _TagBlock(header=raw)
                continue
            entries.append(_Line(raw))
        if tag_block is not None:
            entries.append(tag_block)
        return cls(entries)

    def render(self) -> str:
        lines: list[str] = []
        for entry in self._entries:
            if isinstance(entry, _TagBlock):
                lines.extend(entry.lines())
            else:
                lines.append(entry.raw)
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _find(self, key: str) -> int | None:
        for i, entry in enumerate(self._entries):
            raw = entry.header if isinstance(entry, _TagBlock) else entry.raw
            if _line_key_matches(raw, key):
                return i
        return None

    def _tag_block_index(self) -> int | None:
        for i, entry in enumerate(self._entries):
            if isinstance(entry, _TagBlock):
                return i
        return None

    def __contains__(self, key: str) -> bool:
        return self._find(key) is not None

    def get(self, key: str) -> str:
        """Return the unquoted value of the first ``key:`` line, or ``""``."""
        i = self._find(key)
        if i is None:
            return ""
        entry = self._entries[i]
        raw = entry.header if isinstance(entry, _TagBlock) else entry.raw
        return strip_quotes(_line_value(raw))

    @property
    def tags(self) -> list[str]:
        for entry in self._entries:
            if isinstance(entry, _TagBlock):
                return entry.values()
        return []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _trim_trailing(self) -> None:
        """Drop trailing blank lines and trailing whitespace on the last line."""
        while self._entries and isinstance(self._entries[-1], _Line) and not self._entries[-1].raw.strip():
            self._entries.pop()
        if not self._entries:
            return
        last = self._entries[-1]
        if isinstance(last, _Line):
            last.raw = last.raw.rstrip()
        elif last.items:
            last.items[-1] = last.items[-1].rstrip()
        else:
            last.header = last.header.rstrip()

    def set(self, key: str, line: str) -> None:
        """Replace the first ``key:`` line with *line*, or append it."""
        i = self._find(key)
        if i is not None and isinstance(self._entries[i], _Line):
            self._entries[i] = _Line(line)
            return
        self._trim_trailing()
        self._entries.append(_Line(line))

    def remove(self, key: str) -> None:
        i = self._find(key)
        if i is not None:
            del self._entries[i]

    def set_tags(self, tags: Iterable[str]) -> None:
        """Rewrite the ``tags:`` block; an empty list removes it entirely."""
        tags = list(tags)
        i = self._tag_block_index()
        if not tags:
            if i is not None:
                del self._entries[i]
            return
        block = _TagBlock(header=f"{TAGS_KEY}:", items=[f"  - {t}" for t in tags])
        if i is not None:
            self._entries[i] = block
            return
        self._trim_trailing()
        self._entries.append(block)


# ---------------------------------------------------------------------------
# Block-level helpers
# ---------------------------------------------------------------------------


def get_scalar_field(block: str, key: str) -> str:
    return Frontmatter.parse(block).get(key)


def get_tag_list(block: str) -> list[str]:
    return Frontmatter.parse(block).tags


def set_scalar_field(block: str, key: str, line: str) -> str:
    fm = Frontmatter.parse(block)
    fm.set(key, line)
    return fm.render()


def remove_field(block: str, key: str) -> str:
    fm = Frontmatter.parse(block)
    fm.remove(key)
    return fm.render()


def set_tag_list(block: str, tags: Iterable[str]) -> str:
    fm = Frontmatter.parse(block)
    fm.set_tags(tags)
    return fm.render()

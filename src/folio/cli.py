"""Command line entry point for folio."""

from __future__ import annotations

import logging
import re
import sys
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator

import click

from folio.config import SiteConfig
from folio.db import CollectionDB
from folio.editor import DEFAULT_SLUG, FieldEdits, NewRecord, create_record, edit_record, read_record
from folio.errors import FolioError, InvalidDate
from folio.index import CollectionIndex
from folio.prompts import InputProvider, ask_required, choose_input, read_piped_body
from folio.record import DEFAULT_STATUS, STATUS_VALUES
from folio.text import parse_calendar_date, slugify

logger = logging.getLogger(__name__)

_STATUS_QUESTION = f"Status ({'/'.join(STATUS_VALUES)})"


@contextmanager
def _reported() -> Iterator[None]:
    """Turn library errors into a one-line message and exit code 1."""
    try:
        yield
    except FolioError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site root holding content/ (default: $FOLIO_ROOT or the current directory)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, verbose: bool):
    """Create, edit and search dated article records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["site"] = SiteConfig.from_env(root)
    logger.debug("Site root: %s", ctx.obj["site"].root)
    ctx.obj.setdefault("input", choose_input(sys.stdin))


# ---------------------------------------------------------------------------
# new
# ---------------------------------------------------------------------------


def _ask_date(provider: InputProvider, given: str | None) -> date:
    today = date.today().isoformat()
    value = given or ask_required(provider, "Date (YYYY-MM-DD)", today)
    while True:
        try:
            return parse_calendar_date(value)
        except InvalidDate as exc:
            if not provider.interactive:
                raise
            click.echo(str(exc), err=True)
            value = ask_required(provider, "Date (YYYY-MM-DD)", today)


@cli.command("new")
@click.option("--date", "date_text", help="Publication date, YYYY-MM-DD (default: today)")
@click.option("--title", help="Article title")
@click.option("--slug", help="URL slug (default: derived from the title)")
@click.option("--status", help=f"One of {', '.join(STATUS_VALUES)}")
@click.option("--summary", help="Short summary")
@click.option("--series", help="Series name")
@click.option("--tags", help="Comma-separated tags")
@click.pass_context
def new_command(
    ctx: click.Context,
    date_text: str | None,
    title: str | None,
    slug: str | None,
    status: str | None,
    summary: str | None,
    series: str | None,
    tags: str | None,
):
    """Create a new article under content/YYYY/MM/DD/NN-slug/."""
    site: SiteConfig = ctx.obj["site"]
    provider: InputProvider = ctx.obj["input"]

    with _reported():
        day = _ask_date(provider, date_text)
        title = title or ask_required(provider, "Title")
        if slug is None:
            slug = provider.ask("Slug", slugify(title) or DEFAULT_SLUG)
        if status is None:
            status = provider.ask(_STATUS_QUESTION, DEFAULT_STATUS)
        if summary is None:
            summary = provider.ask("Summary (optional, two sentences)")
        if series is None:
            series = provider.ask("Series (optional)")
        if tags is None:
            tags = provider.ask("Tags (comma-separated, optional)")

        path = create_record(
            site,
            NewRecord(
                title=title,
                day=day,
                slug=slug,
                status=status,
                summary=summary,
                series=series,
                tags=tags,
            ),
        )

    click.echo("Article created:")
    click.echo(str(path))


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------


def _prompt_edits(provider: InputProvider, site: SiteConfig, target: str, edits: FieldEdits) -> None:
    """Ask for every field the caller did not pass, defaulting to the stored value."""
    record = read_record(site, target)
    questions = [
        ("title", "Title", record.title),
        ("status", _STATUS_QUESTION, record.status or DEFAULT_STATUS),
        ("series", "Series (optional, '-' to clear)", record.series),
        ("summary", "Summary (optional, '-' to clear)", record.summary),
        ("tags", "Tags (comma-separated, '-' to clear)", ", ".join(record.tags)),
    ]
    for attr, question, current in questions:
        if getattr(edits, attr) is not None:
            continue
        answer = provider.ask(question, current)
        if answer != current:
            setattr(edits, attr, answer)


@cli.command("edit")
@click.argument("target", nargs=-1)
@click.option("--title", help="New title")
@click.option("--status", help=f"One of {', '.join(STATUS_VALUES)}")
@click.option("--series", help="New series, or '-' to clear")
@click.option("--summary", help="New summary, or '-' to clear")
@click.option("--tags", help="Comma-separated tags, or '-' to clear")
@click.pass_context
def edit_command(
    ctx: click.Context,
    target: tuple[str, ...],
    title: str | None,
    status: str | None,
    series: str | None,
    summary: str | None,
    tags: str | None,
):
    """Update an article's metadata; pipe text on stdin to replace its body.

    TARGET may be a file, an article folder, or a published URL.
    """
    site: SiteConfig = ctx.obj["site"]
    provider: InputProvider = ctx.obj["input"]
    edits = FieldEdits(title=title, status=status, series=series, summary=summary, tags=tags)

    with _reported():
        target_text = " ".join(target).strip() or ask_required(provider, "Article path, folder, or URL")
        if provider.interactive:
            _prompt_edits(provider, site, target_text, edits)
        body = "" if provider.interactive else read_piped_body(sys.stdin)
        path = edit_record(site, target_text, edits, new_body=body)

    click.echo("Article updated:")
    click.echo(f"- File: {path}")


# ---------------------------------------------------------------------------
# find
# ---------------------------------------------------------------------------


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_limit(text: str) -> int:
    """Leading integer of *text*; anything unparseable means no limit."""
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


@cli.command("find")
@click.argument("query", nargs=-1)
@click.option("--status", default="", help="Only show articles with this status")
@click.option("--limit", "limit_text", default="0", help="Show at most N results (0 or non-numeric: all)")
@click.pass_context
def find_command(ctx: click.Context, query: tuple[str, ...], status: str, limit_text: str):
    """Search titles, summaries, series, tags and paths."""
    site: SiteConfig = ctx.obj["site"]
    provider: InputProvider = ctx.obj["input"]

    term = next((q.strip() for q in query if q.strip()), "")
    if not term:
        term = provider.ask("Search term").strip()
    if not term:
        click.echo('Provide a search term. Example: folio find "templating"')
        ctx.exit(1)

    index = CollectionIndex(site.content_root, site.root)
    index.build()
    matches = index.search(term, status.strip() or None)
    limit = _parse_limit(limit_text)
    shown = matches[:limit] if limit > 0 else matches

    if not shown:
        click.echo(f'No matches for "{term}".')
        return

    click.echo(f"Found {len(matches)} match(es):")
    for entry in shown:
        click.echo(entry.format())


# ---------------------------------------------------------------------------
# stats
# ---------------------------------------------------------------------------


@cli.command("stats")
@click.option("--top", type=int, default=10, help="Number of tags to list")
@click.pass_context
def stats_command(ctx: click.Context, top: int):
    """Summarise the collection by status and tag."""
    site: SiteConfig = ctx.obj["site"]
    index = CollectionIndex(site.content_root, site.root)
    index.build()

    with CollectionDB(index) as db:
        statuses = db.status_counts()
        tags = db.tag_counts().head(top)

    click.echo(f"Articles: {len(index.entries)}")
    for row in statuses.iter_rows(named=True):
        click.echo(f"  {row['status']}: {row['record_count']}")
    if len(tags):
        click.echo("Tags:")
        for row in tags.iter_rows(named=True):
            click.echo(f"  {row['tag']}: {row['record_count']}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()

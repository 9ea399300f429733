"""Unit tests for folio.db.CollectionDB."""

from pathlib import Path

import duckdb
import polars as pl
import pytest

from folio.config import SiteConfig
from folio.db import CollectionDB
from folio.index import CollectionIndex

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def db(site: SiteConfig, write) -> CollectionDB:
    write("2024/03/05/01-alpha", """\
        ---
        title: Alpha
        status: published
        tags:
          - python
          - tutorial
        ---
        Body.
    """)
    write("2024/03/06/01-beta", """\
        ---
        title: Beta
        status: draft
        series: Basics
        tags:
          - python
        ---
        Body.
    """)
    write("2024/03/07/01-gamma", """\
        ---
        title: Gamma
        status: draft
        summary: "Numbers and data."
        tags:
          - data
        ---
        Body.
    """)
    idx = CollectionIndex(site.content_root, site.root)
    idx.build()
    return CollectionDB(idx)


def _titles(df: pl.DataFrame) -> list[str]:
    return list(df["title"])


# ---------------------------------------------------------------------------
# query()
# ---------------------------------------------------------------------------


class TestCollectionDBQuery:
    def test_basic_select(self, db: CollectionDB):
        df = db.query("SELECT title FROM records ORDER BY title")
        assert _titles(df) == ["Alpha", "Beta", "Gamma"]

    def test_returns_polars_dataframe(self, db: CollectionDB):
        assert isinstance(db.query("SELECT path FROM records"), pl.DataFrame)

    def test_parameters(self, db: CollectionDB):
        df = db.query("SELECT title FROM records WHERE status = ? ORDER BY title", ["draft"])
        assert _titles(df) == ["Beta", "Gamma"]

    def test_invalid_sql_raises(self, db: CollectionDB):
        with pytest.raises(duckdb.Error):
            db.query("SELECT * FROM nonexistent_table")


# ---------------------------------------------------------------------------
# table_view()
# ---------------------------------------------------------------------------


class TestTableView:
    def test_all_rows_newest_first(self, db: CollectionDB):
        assert _titles(db.table_view()) == ["Gamma", "Beta", "Alpha"]

    def test_default_columns(self, db: CollectionDB):
        assert db.table_view().columns == ["path", "title", "status", "tags"]

    def test_filter_status(self, db: CollectionDB):
        assert _titles(db.table_view(status="DRAFT")) == ["Gamma", "Beta"]

    def test_filter_tag(self, db: CollectionDB):
        assert _titles(db.table_view(tag="python")) == ["Beta", "Alpha"]

    def test_search_summary_and_series(self, db: CollectionDB):
        assert _titles(db.table_view(search="numbers")) == ["Gamma"]
        assert _titles(db.table_view(search="BASICS")) == ["Beta"]

    def test_combined_filters(self, db: CollectionDB):
        assert _titles(db.table_view(status="draft", tag="python")) == ["Beta"]

    def test_custom_columns_and_order(self, db: CollectionDB):
        df = db.table_view(columns=["title", "series"], order_by="title")
        assert df.columns == ["title", "series"]
        assert _titles(df) == ["Alpha", "Beta", "Gamma"]

    def test_unknown_column_rejected(self, db: CollectionDB):
        with pytest.raises(ValueError):
            db.table_view(columns=["title", "body"])


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class TestStatusBoard:
    def test_groups(self, db: CollectionDB):
        board = db.status_board()
        assert set(board) == {"draft", "published"}
        assert [r["title"] for r in board["draft"]] == ["Gamma", "Beta"]

    def test_missing_status_grouped_as_none(self, site: SiteConfig, write):
        write("2024/01/01/01-bare", "---\ntitle: Bare\n---\n")
        idx = CollectionIndex(site.content_root)
        idx.build()
        with CollectionDB(idx) as d:
            assert "(none)" in d.status_board()


class TestCounts:
    def test_status_counts(self, db: CollectionDB):
        df = db.status_counts()
        assert df.row(0, named=True) == {"status": "draft", "record_count": 2}
        assert df.filter(pl.col("status") == "published")["record_count"][0] == 1

    def test_tag_counts(self, db: CollectionDB):
        df = db.tag_counts()
        assert df.filter(pl.col("tag") == "python")["record_count"][0] == 2
        counts = list(df["record_count"])
        assert counts == sorted(counts, reverse=True)

    def test_empty_collection(self, tmp_path: Path):
        idx = CollectionIndex(tmp_path / "content")
        idx.build()
        with CollectionDB(idx) as d:
            assert len(d.tag_counts()) == 0
            assert len(d.table_view()) == 0


# ---------------------------------------------------------------------------
# refresh()
# ---------------------------------------------------------------------------


class TestRefresh:
    def test_refresh_picks_up_new_record(self, db: CollectionDB, site: SiteConfig, write):
        write("2024/04/01/01-delta", "---\ntitle: Delta\nstatus: review\n---\n")
        idx = CollectionIndex(site.content_root, site.root)
        idx.build()
        db.refresh(idx)
        assert len(db.table_view(status="review")) == 1

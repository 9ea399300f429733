"""CollectionDB — tabular views over the record index.

Uses DuckDB (in-memory) as a query engine over index entries and returns
:mod:`polars` DataFrames.

Usage::

    index = CollectionIndex(site.content_root)
    index.build()
    db = CollectionDB(index)

    df     = db.query("SELECT path, title FROM records WHERE status = 'draft'")
    table  = db.table_view(tag="python", order_by="path DESC")
    board  = db.status_board()     # status -> list of record dicts
    counts = db.tag_counts()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import duckdb
import polars as pl

if TYPE_CHECKING:
    from folio.index import CollectionIndex

NO_STATUS = "(none)"
_COLUMNS = ("path", "title", "status", "series", "summary", "tags")


class CollectionDB:
    """In-memory DuckDB database over a :class:`~folio.index.CollectionIndex`."""

    def __init__(self, index: "CollectionIndex") -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self.refresh(index)

    # ------------------------------------------------------------------
    # Build / refresh
    # ------------------------------------------------------------------

    def refresh(self, index: "CollectionIndex") -> None:
        """(Re-)populate the database from *index* (call after index rebuild)."""
        self._index = index
        self._create_schema()
        self._load_entries()

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE OR REPLACE TABLE records (
                path    VARCHAR PRIMARY KEY,
                title   VARCHAR,
                status  VARCHAR,
                series  VARCHAR,
                summary VARCHAR,
                tags    VARCHAR[]
            )
        """)

    def _load_entries(self) -> None:
        rows = [
            (e.relative_path, e.title, e.status, e.series, e.summary, e.tags)
            for e in self._index.entries
        ]
        if rows:
            self.conn.executemany("INSERT OR REPLACE INTO records VALUES (?,?,?,?,?,?)", rows)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str, params: list[Any] | None = None) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql, params or []).pl()

    def table_view(
        self,
        *,
        status: str | None = None,
        tag: str | None = None,
        search: str | None = None,
        columns: list[str] | None = None,
        order_by: str = "path DESC",
    ) -> pl.DataFrame:
        """Return records as a Polars DataFrame, optionally filtered.

        Parameters
        ----------
        status:
            Only include records with this status (case-insensitive).
        tag:
            Only include records carrying this tag.
        search:
            Case-insensitive substring filter on title, summary or series.
        columns:
            Which columns to include.  Defaults to ``path, title, status, tags``.
        order_by:
            ``ORDER BY`` clause, e.g. ``"title"`` or ``"path DESC"``.
        """
        cols = columns or ["path", "title", "status", "tags"]
        unknown = [c for c in cols if c not in _COLUMNS]
        if unknown:
            raise ValueError(f"Unknown columns: {', '.join(unknown)}")

        where_clauses: list[str] = []
        params: list[Any] = []
        if status:
            where_clauses.append("lower(status) = lower(?)")
            params.append(status.strip())
        if tag:
            where_clauses.append("list_contains(tags, ?)")
            params.append(tag)
        if search:
            where_clauses.append("(title ILIKE ? OR summary ILIKE ? OR series ILIKE ?)")
            params.extend([f"%{search}%"] * 3)

        where = f"WHERE {' AND '.join(where_clauses)}" if where_clauses else ""
        safe_order = order_by.replace(";", "").replace("'", "")
        sql = f"SELECT {', '.join(cols)} FROM records {where} ORDER BY {safe_order}"
        return self.query(sql, params)

    def status_board(self) -> dict[str, list[dict[str, Any]]]:
        """Group records by status for a kanban-style view.

        Records with an empty status are grouped under ``"(none)"``.
        """
        df = self.query(
            f"""
            SELECT
                path, title, tags,
                COALESCE(NULLIF(lower(status), ''), '{NO_STATUS}') AS group_val
            FROM records
            ORDER BY group_val, path DESC
            """
        )
        groups: dict[str, list[dict[str, Any]]] = {}
        for row in df.to_dicts():
            gv = str(row.pop("group_val"))
            groups.setdefault(gv, []).append(row)
        return groups

    def status_counts(self) -> pl.DataFrame:
        """Return a status → count table sorted by frequency."""
        return self.query(
            f"""
            SELECT COALESCE(NULLIF(lower(status), ''), '{NO_STATUS}') AS status, COUNT(*) AS record_count
            FROM records
            GROUP BY 1
            ORDER BY record_count DESC, 1
            """
        )

    def tag_counts(self) -> pl.DataFrame:
        """Return a tag → count table sorted by frequency."""
        return self.query(
            """
            SELECT tag, COUNT(*) AS record_count
            FROM (SELECT unnest(tags) AS tag FROM records)
            GROUP BY tag
            ORDER BY record_count DESC, tag
            """
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "CollectionDB":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

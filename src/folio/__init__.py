"""folio: dated article records with frontmatter, edits, and search."""

from folio.addressing import build_path, compute_ordinal, resolve
from folio.config import SiteConfig
from folio.db import CollectionDB
from folio.editor import FieldEdits, NewRecord, create_record, edit_record
from folio.frontmatter import Frontmatter, decode, encode
from folio.index import CollectionIndex, IndexEntry, search
from folio.record import Record, load_record
from folio.text import normalize_tag, parse_calendar_date, slugify

__all__ = [
    "SiteConfig",
    "Record",
    "load_record",
    "Frontmatter",
    "decode",
    "encode",
    "build_path",
    "compute_ordinal",
    "resolve",
    "NewRecord",
    "FieldEdits",
    "create_record",
    "edit_record",
    "CollectionIndex",
    "IndexEntry",
    "search",
    "CollectionDB",
    "slugify",
    "normalize_tag",
    "parse_calendar_date",
]

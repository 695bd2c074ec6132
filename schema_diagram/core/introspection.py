"""
Build a Schema from a live SQLite database.

Tables are listed in discovery order and laid out on the default grid.
Foreign keys are not discovered; pass `relationships` explicitly.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from .config import DEFAULT_LAYOUT, LayoutConfig
from .layout import auto_place
from .models import Column, Relationship, Schema, Table

logger = logging.getLogger(__name__)

LIST_TABLES_SQL = (
    "SELECT name FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
    "ORDER BY rowid"
)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def list_tables(conn: sqlite3.Connection) -> list[str]:
    return [row[0] for row in conn.execute(LIST_TABLES_SQL).fetchall()]


def read_columns(conn: sqlite3.Connection, table_name: str,
                 foreign_keys: Optional[set[str]] = None) -> list[Column]:
    """
    Columns of one table in engine order.

    PRAGMA table_info rows are (cid, name, type, notnull, dflt_value, pk);
    pk is 0 for non-key columns and the 1-based key position otherwise.
    """
    foreign_keys = foreign_keys or set()
    rows = conn.execute(f"PRAGMA table_info({_quote_identifier(table_name)})").fetchall()
    return [
        Column(
            name=row[1],
            type=row[2] or "",
            is_primary_key=bool(row[5]),
            is_foreign_key=row[1] in foreign_keys,
        )
        for row in rows
    ]


def introspect_sqlite(
    conn: sqlite3.Connection,
    relationships: Optional[list[Relationship]] = None,
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Schema:
    """
    Enumerate tables and columns of an open database.

    Columns on the `from` side of a supplied relationship are flagged as
    foreign keys. sqlite3 errors propagate to the caller.
    """
    relationships = list(relationships or [])
    fk_columns: dict[str, set[str]] = {}
    for rel in relationships:
        fk_columns.setdefault(rel.from_table, set()).add(rel.from_column)

    tables = [
        Table(name=name, columns=read_columns(conn, name, fk_columns.get(name)))
        for name in list_tables(conn)
    ]
    logger.debug("Introspected %d tables", len(tables))
    return auto_place(Schema(tables=tables, relationships=relationships),
                      overwrite=True, config=config)


def load_sqlite_schema(
    path: str | Path,
    relationships: Optional[list[Relationship]] = None,
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Schema:
    """Open a database file read-only and introspect it."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Database file not found: {path}")

    conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    try:
        return introspect_sqlite(conn, relationships, config)
    finally:
        conn.close()

import sqlite3

import pytest

from schema_diagram.core.introspection import introspect_sqlite, list_tables, load_sqlite_schema
from schema_diagram.core.models import Position, Relationship


def test_tables_in_discovery_order_on_grid(shop_db):
    schema = load_sqlite_schema(shop_db)
    assert schema.table_names() == ["customers", "orders", "order items"]
    assert [t.position for t in schema.tables] == [
        Position(x=0, y=0), Position(x=320, y=0), Position(x=640, y=0)
    ]
    assert schema.relationships == []


def test_columns_types_and_primary_keys(shop_db):
    schema = load_sqlite_schema(shop_db)
    customers = schema.get_table("customers")
    assert [(c.name, c.type, c.is_primary_key) for c in customers.columns] == [
        ("id", "INTEGER", True),
        ("name", "varchar(255)", False),
        ("email", "TEXT", False),
    ]
    # Composite keys flag every member
    items = schema.get_table("order items")
    assert [c.is_primary_key for c in items.columns] == [True, True]


def test_supplied_relationships_flag_foreign_keys(shop_db):
    rel = Relationship(from_table="orders", from_column="customer_id",
                       to_table="customers", to_column="id")
    schema = load_sqlite_schema(shop_db, [rel])
    orders = schema.get_table("orders")
    assert [c.is_foreign_key for c in orders.columns] == [False, True, False]
    assert schema.relationships == [rel]


def test_introspect_open_connection():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    try:
        assert list_tables(conn) == ["users"]
        schema = introspect_sqlite(conn)
    finally:
        conn.close()
    assert schema.tables[0].columns[1].type == "TEXT"


def test_empty_database(tmp_path):
    path = tmp_path / "empty.db"
    sqlite3.connect(path).close()
    assert load_sqlite_schema(path).tables == []


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_sqlite_schema(tmp_path / "nope.db")

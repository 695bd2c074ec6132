import sqlite3

import pytest

from schema_diagram.backend.session import diagram_session
from schema_diagram.core.models import Column, Position, Relationship, Schema, Table


@pytest.fixture
def two_tables():
    """A at (0, 0) and B at (320, 0), one `id` column each, A.id -> B.id."""
    return Schema(
        tables=[
            Table(name="A", columns=[Column(name="id", type="integer", is_foreign_key=True)],
                  position=Position(x=0, y=0)),
            Table(name="B", columns=[Column(name="id", type="integer", is_primary_key=True)],
                  position=Position(x=320, y=0)),
        ],
        relationships=[Relationship(from_table="A", from_column="id", to_table="B", to_column="id")],
    )


@pytest.fixture
def shop_schema():
    return Schema(
        tables=[
            Table(name="customers", columns=[
                Column(name="id", type="INTEGER", is_primary_key=True),
                Column(name="name", type="varchar(255)"),
            ]),
            Table(name="orders", columns=[
                Column(name="id", type="integer", is_primary_key=True),
                Column(name="customer_id", type="integer", is_foreign_key=True),
                Column(name="total", type="real"),
            ]),
        ],
        relationships=[
            Relationship(from_table="orders", from_column="customer_id",
                         to_table="customers", to_column="id"),
        ],
    )


@pytest.fixture
def shop_db(tmp_path):
    path = tmp_path / "shop.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE customers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name varchar(255) NOT NULL,
            email TEXT UNIQUE NOT NULL
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            customer_id INTEGER NOT NULL,
            total REAL
        );
        CREATE TABLE "order items" (
            order_id INTEGER,
            sku TEXT,
            PRIMARY KEY (order_id, sku)
        );
        """
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def fresh_session():
    diagram_session.mount(Schema())
    yield diagram_session
    diagram_session.mount(Schema())

import pytest

from schema_diagram.core.config import DEFAULT_LAYOUT, LayoutConfig
from schema_diagram.core.layout import (
    CanvasSize,
    auto_place,
    canvas_size,
    connector_geometry,
    connectors,
    grid_layout,
    grid_position,
    index_tables,
    table_bounds,
    table_height,
)
from schema_diagram.core.models import Column, Position, Relationship, Schema, Table

HEADER = DEFAULT_LAYOUT.header_height
ROW = DEFAULT_LAYOUT.row_height
WIDTH = DEFAULT_LAYOUT.table_width
PADDING = DEFAULT_LAYOUT.canvas_padding


def _table(name, n_columns=1, position=None):
    return Table(
        name=name,
        columns=[Column(name=f"c{i}", type="integer") for i in range(n_columns)],
        position=position,
    )


@pytest.mark.parametrize("n_columns", [0, 1, 5])
def test_table_height_counts_rows(n_columns):
    assert table_height(_table("t", n_columns)) == HEADER + ROW * n_columns


def test_table_height_uses_config():
    config = LayoutConfig(header_height=10, row_height=5)
    assert table_height(_table("t", 3), config) == 25


def test_table_bounds_unplaced_is_none():
    assert table_bounds(_table("t")) is None
    assert table_bounds(_table("t", 2, Position(x=10, y=20))) == (10, 20, 10 + WIDTH, 20 + HEADER + 2 * ROW)


def test_canvas_size_empty_is_default():
    assert canvas_size([]) == CanvasSize(800, 600)


def test_canvas_size_covers_every_table():
    tables = [
        _table("a", 2, Position(x=0, y=0)),
        _table("b", 8, Position(x=640, y=0)),
        _table("c", 1, Position(x=320, y=500)),
    ]
    size = canvas_size(tables)
    assert size.width == 640 + WIDTH + PADDING
    assert size.height == max(HEADER + 8 * ROW, 500 + HEADER + ROW) + PADDING
    for t in tables:
        assert size.width >= t.position.x + WIDTH + PADDING
        assert size.height >= t.position.y + table_height(t) + PADDING


def test_canvas_size_ignores_unplaced_tables():
    placed = _table("a", 1, Position(x=100, y=100))
    size = canvas_size([placed, _table("ghost", 50)])
    assert size == CanvasSize(100 + WIDTH + PADDING, 100 + HEADER + ROW + PADDING)


def test_canvas_size_all_unplaced_falls_back_to_default():
    assert canvas_size([_table("ghost")]) == CanvasSize(800, 600)


def test_canvas_size_never_negative():
    far_off = _table("a", 1, Position(x=-500, y=-400))
    assert canvas_size([far_off]) == CanvasSize(PADDING, PADDING)


def test_grid_positions_follow_discovery_order():
    expected = [(0, 0), (320, 0), (640, 0), (0, 250), (320, 250), (640, 250)]
    assert [(p.x, p.y) for p in (grid_position(i) for i in range(6))] == expected


def test_grid_layout_returns_new_tables():
    tables = [_table(f"t{i}") for i in range(4)]
    placed = grid_layout(tables)
    assert all(t.position is None for t in tables)
    assert [(t.position.x, t.position.y) for t in placed] == [(0, 0), (320, 0), (640, 0), (0, 250)]


def test_auto_place_keeps_existing_positions_by_default():
    schema = Schema(tables=[_table("a", position=Position(x=5, y=5)), _table("b")])
    placed = auto_place(schema)
    assert placed.tables[0].position == Position(x=5, y=5)
    assert placed.tables[1].position == Position(x=320, y=0)
    assert schema.tables[1].position is None


def test_auto_place_overwrite():
    schema = Schema(tables=[_table("a", position=Position(x=5, y=5))])
    assert auto_place(schema, overwrite=True).tables[0].position == Position(x=0, y=0)


def test_connector_between_adjacent_tables(two_tables):
    [geometry] = connectors(two_tables)
    assert geometry.start == (WIDTH, HEADER + ROW / 2)
    assert geometry.end == (320, HEADER + ROW / 2)
    assert geometry.angle == 0
    assert geometry.length == 320 - WIDTH


def test_connector_uses_column_index_and_angle():
    a = Table(name="a", columns=[Column(name="id"), Column(name="b_id")], position=Position(x=0, y=0))
    b = Table(name="b", columns=[Column(name="id")], position=Position(x=WIDTH, y=ROW))
    rel = Relationship(from_table="a", from_column="b_id", to_table="b", to_column="id")
    geometry = connector_geometry(rel, index_tables([a, b]))
    # Second row of a lines up exactly with the first row of b
    assert geometry.start == (WIDTH, HEADER + ROW + ROW / 2)
    assert geometry.end == geometry.start
    assert geometry.length == 0


def test_connector_pointing_down_left():
    a = _table("a", 1, Position(x=400, y=0))
    b = _table("b", 1, Position(x=0, y=400 + WIDTH))
    rel = Relationship(from_table="a", from_column="c0", to_table="b", to_column="c0")
    geometry = connector_geometry(rel, index_tables([a, b]))
    # dx = -(400 + WIDTH), dy = 400 + WIDTH
    assert geometry.angle == pytest.approx(135)
    assert geometry.length == pytest.approx((400 + WIDTH) * 2 ** 0.5)


@pytest.mark.parametrize("rel", [
    Relationship(from_table="A", from_column="id", to_table="missing", to_column="id"),
    Relationship(from_table="missing", from_column="id", to_table="B", to_column="id"),
    Relationship(from_table="A", from_column="nope", to_table="B", to_column="id"),
    Relationship(from_table="A", from_column="id", to_table="B", to_column="nope"),
])
def test_dangling_relationships_are_skipped(two_tables, rel):
    schema = two_tables.model_copy(update={"relationships": [rel]})
    assert connectors(schema) == []
    assert canvas_size(schema.tables) == canvas_size(two_tables.tables)


def test_relationship_to_unplaced_table_is_skipped(two_tables):
    tables = [two_tables.tables[0], two_tables.tables[1].model_copy(update={"position": None})]
    schema = two_tables.model_copy(update={"tables": tables})
    assert connectors(schema) == []


def test_duplicate_table_names_first_wins():
    first = _table("t", 1, Position(x=0, y=0))
    second = _table("t", 1, Position(x=999, y=999))
    assert index_tables([first, second])["t"] is first

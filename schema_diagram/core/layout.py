"""
Layout geometry for schema diagrams.

Pure functions deriving every spatial quantity from a Schema:
- Table card height from its column count
- Canvas extent covering all positioned tables
- Grid auto-placement from table discovery order
- Connector endpoints between column anchor points

None of these functions mutate their inputs; placement returns new models.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .config import DEFAULT_LAYOUT, LayoutConfig
from .models import Position, Relationship, Schema, Table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ConnectorGeometry:
    """
    A straight segment between two column anchors.

    Drawn as a unit-height line placed at `start` and rotated by `angle`
    degrees, with `length` as its width.
    """
    relationship: Relationship
    start: tuple[float, float]
    end: tuple[float, float]
    length: float
    angle: float


def table_height(table: Table, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    """Header plus one row per column."""
    return config.header_height + len(table.columns) * config.row_height


def table_bounds(
    table: Table,
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Optional[tuple[float, float, float, float]]:
    """Get the bounding box (x, y, right, bottom), or None if unplaced."""
    if table.position is None:
        return None
    x, y = table.position.x, table.position.y
    return (x, y, x + config.table_width, y + table_height(table, config))


def canvas_size(tables: list[Table], config: LayoutConfig = DEFAULT_LAYOUT) -> CanvasSize:
    """
    Compute the canvas extent needed to show every positioned table.

    The size is the furthest right and bottom edge plus the padding margin.
    Unpositioned tables do not contribute. With no positioned tables the
    configured default size is returned. The right and bottom edges never
    fall below the origin, so the size is at least the padding.
    """
    bounds = [b for b in (table_bounds(t, config) for t in tables) if b is not None]
    if not bounds:
        return CanvasSize(config.default_canvas_width, config.default_canvas_height)

    max_right = max(0, *(b[2] for b in bounds))
    max_bottom = max(0, *(b[3] for b in bounds))
    return CanvasSize(
        width=max_right + config.canvas_padding,
        height=max_bottom + config.canvas_padding,
    )


def grid_position(index: int, config: LayoutConfig = DEFAULT_LAYOUT) -> Position:
    """Grid cell for the table discovered at `index`."""
    col = index % config.grid_columns
    row = index // config.grid_columns
    return Position(x=col * config.grid_spacing_x, y=row * config.grid_spacing_y)


def grid_layout(
    tables: list[Table],
    config: LayoutConfig = DEFAULT_LAYOUT,
    overwrite: bool = True
) -> list[Table]:
    """
    Arrange tables in a fixed-column grid by discovery order.

    Args:
        tables: Tables to arrange
        config: Grid columns and spacing
        overwrite: Re-place tables that already have a position

    Returns:
        New table objects; the input list is left untouched
    """
    placed = []
    for i, table in enumerate(tables):
        if table.position is not None and not overwrite:
            placed.append(table)
        else:
            placed.append(table.model_copy(update={"position": grid_position(i, config)}))
    return placed


def auto_place(
    schema: Schema,
    overwrite: bool = False,
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Schema:
    """Return a copy of the schema where every table has a position."""
    return schema.model_copy(update={
        "tables": grid_layout(schema.tables, config, overwrite=overwrite)
    })


def column_anchor_offset(index: int, config: LayoutConfig = DEFAULT_LAYOUT) -> float:
    """Vertical offset of a column row's midline from the top of its table."""
    return config.header_height + index * config.row_height + config.row_height / 2


def connector_geometry(
    relationship: Relationship,
    tables_by_name: dict[str, Table],
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Optional[ConnectorGeometry]:
    """
    Compute the segment for one relationship.

    Returns None when either table is missing or unplaced, or either column
    is not found. Those relationships are simply not drawn.
    """
    from_table = tables_by_name.get(relationship.from_table)
    to_table = tables_by_name.get(relationship.to_table)
    if from_table is None or to_table is None:
        logger.debug("Skipping relationship %s: unknown table", relationship.key)
        return None
    if from_table.position is None or to_table.position is None:
        logger.debug("Skipping relationship %s: unplaced table", relationship.key)
        return None

    from_index = from_table.column_index(relationship.from_column)
    to_index = to_table.column_index(relationship.to_column)
    if from_index is None or to_index is None:
        logger.debug("Skipping relationship %s: unknown column", relationship.key)
        return None

    # Right edge of the source table, left edge of the target
    start_x = from_table.position.x + config.table_width
    start_y = from_table.position.y + column_anchor_offset(from_index, config)
    end_x = to_table.position.x
    end_y = to_table.position.y + column_anchor_offset(to_index, config)

    dx = end_x - start_x
    dy = end_y - start_y
    return ConnectorGeometry(
        relationship=relationship,
        start=(start_x, start_y),
        end=(end_x, end_y),
        length=math.hypot(dx, dy),
        angle=math.degrees(math.atan2(dy, dx)),
    )


def index_tables(tables: list[Table]) -> dict[str, Table]:
    """Name -> table lookup; the first table with a given name wins."""
    index: dict[str, Table] = {}
    for table in tables:
        index.setdefault(table.name, table)
    return index


def connectors(schema: Schema, config: LayoutConfig = DEFAULT_LAYOUT) -> list[ConnectorGeometry]:
    """Geometry for every resolvable relationship, in relationship order."""
    tables_by_name = index_tables(schema.tables)
    result = []
    for relationship in schema.relationships:
        geometry = connector_geometry(relationship, tables_by_name, config)
        if geometry is not None:
            result.append(geometry)
    return result

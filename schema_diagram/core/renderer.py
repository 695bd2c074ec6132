"""
Diagram scene composition.

render_scene combines layout geometry, viewport state and the current
selection into a drawable Scene: positioned table cards with their column
rows, and one connector per resolvable relationship. It is a pure function
and may be recomputed on every state change.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import DEFAULT_LAYOUT, LayoutConfig
from .layout import ConnectorGeometry, canvas_size, connectors, table_height
from .models import Column, Schema, Table
from .viewport import ViewportState

logger = logging.getLogger(__name__)

TABLE_ICON = "\U0001F4CA"
PRIMARY_KEY_BADGE = "PK"
FOREIGN_KEY_BADGE = "FK"


def format_type(type_name: str) -> str:
    """
    Display label for a column type.

    varchar types keep their original spelling; everything else is shown
    upper-cased.
    """
    return type_name if "varchar" in type_name.lower() else type_name.upper()


def key_badges(column: Column) -> list[str]:
    badges = []
    if column.is_primary_key:
        badges.append(PRIMARY_KEY_BADGE)
    if column.is_foreign_key:
        badges.append(FOREIGN_KEY_BADGE)
    return badges


@dataclass(frozen=True)
class ColumnRow:
    name: str
    type_label: str
    badges: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.type_label, "badges": list(self.badges)}


@dataclass(frozen=True)
class TableBox:
    """A table card positioned on the canvas."""
    name: str
    x: float
    y: float
    width: float
    height: float
    selected: bool = False
    icon: str = TABLE_ICON
    rows: list[ColumnRow] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Accessible label for the card."""
        return f"Table {self.name}. Click to select"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "selected": self.selected,
            "icon": self.icon,
            "label": self.label,
            "rows": [r.to_dict() for r in self.rows],
        }


@dataclass(frozen=True)
class ConnectorSegment:
    """
    A relationship line: a unit-height bar of `length` placed at `start` and
    rotated by `angle` degrees around that point.
    """
    id: str
    from_table: str
    from_column: str
    to_table: str
    to_column: str
    start: tuple[float, float]
    end: tuple[float, float]
    length: float
    angle: float

    @classmethod
    def from_geometry(cls, geometry: ConnectorGeometry) -> "ConnectorSegment":
        rel = geometry.relationship
        return cls(
            id=rel.key,
            from_table=rel.from_table,
            from_column=rel.from_column,
            to_table=rel.to_table,
            to_column=rel.to_column,
            start=geometry.start,
            end=geometry.end,
            length=geometry.length,
            angle=geometry.angle,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "from_table": self.from_table,
            "from_column": self.from_column,
            "to_table": self.to_table,
            "to_column": self.to_column,
            "left": self.start[0],
            "top": self.start[1],
            "end": {"x": self.end[0], "y": self.end[1]},
            "length": self.length,
            "angle": self.angle,
        }


@dataclass(frozen=True)
class Scene:
    """Everything needed to draw one frame of the diagram."""
    width: float
    height: float
    viewport: ViewportState
    tables: list[TableBox] = field(default_factory=list)
    connectors: list[ConnectorSegment] = field(default_factory=list)
    selected_table: Optional[str] = None

    @property
    def transform(self) -> str:
        return self.viewport.css_transform()

    def get_table(self, name: str) -> Optional[TableBox]:
        for box in self.tables:
            if box.name == name:
                return box
        return None

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "transform": self.transform,
            "viewport": self.viewport.to_dict(),
            "selected_table": self.selected_table,
            "tables": [t.to_dict() for t in self.tables],
            "connectors": [c.to_dict() for c in self.connectors],
        }


def build_table_box(table: Table, selected: bool, config: LayoutConfig = DEFAULT_LAYOUT) -> TableBox:
    """Card for a positioned table."""
    return TableBox(
        name=table.name,
        x=table.position.x,
        y=table.position.y,
        width=config.table_width,
        height=table_height(table, config),
        selected=selected,
        rows=[
            ColumnRow(name=c.name, type_label=format_type(c.type), badges=key_badges(c))
            for c in table.columns
        ],
    )


def render_scene(
    schema: Schema,
    viewport: Optional[ViewportState] = None,
    selected_table: Optional[str] = None,
    config: LayoutConfig = DEFAULT_LAYOUT
) -> Scene:
    """
    Compose the drawable scene.

    Unplaced tables are left out (place them with layout.auto_place first).
    Relationships that cannot be resolved produce no connector.
    """
    viewport = viewport or ViewportState()
    size = canvas_size(schema.tables, config)

    boxes = []
    for table in schema.tables:
        if table.position is None:
            logger.debug("Not drawing unplaced table %s", table.name)
            continue
        boxes.append(build_table_box(table, selected_table == table.name, config))

    segments = [ConnectorSegment.from_geometry(g) for g in connectors(schema, config)]

    return Scene(
        width=size.width,
        height=size.height,
        viewport=viewport,
        tables=boxes,
        connectors=segments,
        selected_table=selected_table,
    )

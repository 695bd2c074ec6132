"""
Schema Diagram Core - Models, layout geometry, viewport and selection state.

This package is the pure engine shared by the backend API, the CLI and the
MCP tools, so all of them draw the same diagram from the same schema.
"""

from .config import LayoutConfig, ViewportConfig, DEFAULT_LAYOUT, DEFAULT_VIEWPORT

from .models import (
    Position,
    Column,
    Table,
    Relationship,
    Schema,
)

from .layout import (
    CanvasSize,
    ConnectorGeometry,
    table_height,
    table_bounds,
    canvas_size,
    grid_position,
    grid_layout,
    auto_place,
    connector_geometry,
    connectors,
)

from .viewport import (
    Offset,
    ViewportState,
    ViewportController,
    PanMode,
)

from .selection import SelectionController, handle_table_click, handle_table_key
from .renderer import Scene, TableBox, ColumnRow, ConnectorSegment, render_scene, format_type
from .validation import validate_schema, validation_summary, ValidationIssue, IssueSeverity
from .introspection import introspect_sqlite, load_sqlite_schema
from .svg import scene_to_svg

__all__ = [
    # Config
    "LayoutConfig",
    "ViewportConfig",
    "DEFAULT_LAYOUT",
    "DEFAULT_VIEWPORT",
    # Models
    "Position",
    "Column",
    "Table",
    "Relationship",
    "Schema",
    # Layout
    "CanvasSize",
    "ConnectorGeometry",
    "table_height",
    "table_bounds",
    "canvas_size",
    "grid_position",
    "grid_layout",
    "auto_place",
    "connector_geometry",
    "connectors",
    # Viewport
    "Offset",
    "ViewportState",
    "ViewportController",
    "PanMode",
    # Selection
    "SelectionController",
    "handle_table_click",
    "handle_table_key",
    # Rendering
    "Scene",
    "TableBox",
    "ColumnRow",
    "ConnectorSegment",
    "render_scene",
    "format_type",
    "scene_to_svg",
    # Validation
    "validate_schema",
    "validation_summary",
    "ValidationIssue",
    "IssueSeverity",
    # Schema source
    "introspect_sqlite",
    "load_sqlite_schema",
]

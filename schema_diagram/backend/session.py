"""
Diagram Session - State for one mounted schema diagram.

This module implements:
- The mounted Schema with O(1) table lookups
- Viewport and selection state owned by their controllers
- The host reaction to table activation (a default query for the editor)
- Change callbacks for real-time sync

The session is the only place that mutates state; scenes are re-derived
from it on demand and never cached across events.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..core.config import DEFAULT_LAYOUT, DEFAULT_VIEWPORT, LayoutConfig, ViewportConfig
from ..core.introspection import load_sqlite_schema
from ..core.layout import auto_place, index_tables
from ..core.models import Relationship, Schema, Table
from ..core.renderer import Scene, render_scene
from ..core.selection import SelectionController, handle_table_key
from ..core.svg import scene_to_svg
from ..core.validation import ValidationIssue, validate_schema
from ..core.viewport import ViewportController

logger = logging.getLogger(__name__)


def default_query(table_name: str) -> str:
    """The statement the editor is pre-filled with when a table is activated."""
    if table_name.isidentifier():
        return f"SELECT * FROM {table_name};"
    return 'SELECT * FROM "{}";'.format(table_name.replace('"', '""'))


class DiagramSession:
    """
    Holds the schema being shown plus its interaction state.

    Features:
    - mount() replaces the schema and resets the viewport
    - Viewport gestures and selection are forwarded to their controllers
    - Change and selection callbacks for broadcasting to clients
    """

    def __init__(self, layout: LayoutConfig = DEFAULT_LAYOUT,
                 viewport: ViewportConfig = DEFAULT_VIEWPORT):
        self._layout = layout
        self._viewport_config = viewport
        self._schema = Schema()
        self._source: Optional[str] = None
        self._viewport = ViewportController(viewport)
        self._selection = SelectionController(on_table_select=self._on_table_select)
        self._editor_query: Optional[str] = None
        self._on_change_callbacks: list[Callable[[], None]] = []
        self._on_select_callbacks: list[Callable[[str], None]] = []
        self._table_index: dict[str, Table] = {}

    # --- Properties ---

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def viewport(self) -> ViewportController:
        return self._viewport

    @property
    def selected_table(self) -> Optional[str]:
        return self._selection.selected_table

    @property
    def editor_query(self) -> Optional[str]:
        return self._editor_query

    @property
    def layout(self) -> LayoutConfig:
        return self._layout

    # --- Callbacks ---

    def on_change(self, callback: Callable[[], None]):
        """Register a callback for any state change."""
        self._on_change_callbacks.append(callback)

    def on_select(self, callback: Callable[[str], None]):
        """Register a callback receiving the name of each activated table."""
        self._on_select_callbacks.append(callback)

    def remove_callbacks(self, *callbacks: Callable):
        for callback in callbacks:
            if callback in self._on_change_callbacks:
                self._on_change_callbacks.remove(callback)
            if callback in self._on_select_callbacks:
                self._on_select_callbacks.remove(callback)

    def _notify_change(self):
        for callback in self._on_change_callbacks:
            callback()

    def _on_table_select(self, table_name: str):
        # Host reaction: offer the table's rows in the query editor
        self._editor_query = default_query(table_name)
        logger.info("Table activated: %s", table_name)
        for callback in self._on_select_callbacks:
            callback(table_name)

    # --- Schema ---

    def mount(self, schema: Schema, selected_table: Optional[str] = None,
              place: bool = True, source: Optional[str] = None) -> Schema:
        """
        Show a new schema.

        Unplaced tables get grid positions when `place` is set. The viewport
        is reset; the initial selection is set without notifying the host.
        """
        if place:
            schema = auto_place(schema, overwrite=False, config=self._layout)
        self._schema = schema
        self._source = source
        self._table_index = index_tables(schema.tables)
        self._viewport = ViewportController(self._viewport_config)
        self._selection = SelectionController(selected_table, on_table_select=self._on_table_select)
        self._editor_query = None
        logger.info("Mounted schema with %d tables, %d relationships",
                    len(schema.tables), len(schema.relationships))
        self._notify_change()
        return schema

    def mount_sqlite(self, path: str | Path,
                     relationships: Optional[list[Relationship]] = None) -> Schema:
        """Introspect a SQLite database file and show its schema."""
        schema = load_sqlite_schema(path, relationships, self._layout)
        return self.mount(schema, place=False, source=str(path))

    def get_table(self, name: str) -> Optional[Table]:
        """Get a table by name (O(1) lookup)."""
        return self._table_index.get(name)

    # --- Viewport ---

    def zoom_in(self):
        self._viewport.zoom_in()
        self._notify_change()
        return self._viewport.state

    def zoom_out(self):
        self._viewport.zoom_out()
        self._notify_change()
        return self._viewport.state

    def reset_view(self):
        self._viewport.reset()
        self._notify_change()
        return self._viewport.state

    def begin_pan(self, x: float, y: float):
        self._viewport.pointer_down(x, y)
        return self._viewport.state

    def continue_pan(self, x: float, y: float):
        if self._viewport.pointer_move(x, y):
            self._notify_change()
        return self._viewport.state

    def end_pan(self):
        self._viewport.pointer_up()
        return self._viewport.state

    # --- Selection ---

    def select_table(self, name: str) -> Optional[str]:
        self._selection.select(name)
        self._notify_change()
        return self._editor_query

    def key_table(self, name: str, key: str) -> bool:
        """Keyboard activation on a table card; True if the key was handled."""
        handled = handle_table_key(self._selection, name, key)
        if handled:
            self._notify_change()
        return handled

    # --- Derived views ---

    def scene(self) -> Scene:
        return render_scene(self._schema, self._viewport.state,
                            self._selection.selected_table, self._layout)

    def svg(self, legend: bool = True) -> str:
        return scene_to_svg(self.scene(), self._layout, legend=legend)

    def validate(self) -> list[ValidationIssue]:
        return validate_schema(self._schema)

    def get_state(self) -> dict:
        """Get the full current state for API responses."""
        return {
            "schema": self._schema.to_json_dict(),
            "source": self._source,
            "viewport": self._viewport.to_dict(),
            "selected_table": self._selection.selected_table,
            "editor_query": self._editor_query,
        }


# Global instance for the application
diagram_session = DiagramSession()

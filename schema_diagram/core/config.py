"""
Shared layout and viewport constants.

Geometry (layout.py) and drawing (renderer.py, svg.py) read their sizes from
the same LayoutConfig instance so the computed canvas and connector anchors
always match the boxes that get drawn.
"""

from pydantic import BaseModel, ConfigDict


class LayoutConfig(BaseModel):
    """Fixed pixel constants for table cards, canvas and auto-placement."""
    model_config = ConfigDict(frozen=True)

    table_width: float = 160
    header_height: float = 40
    row_height: float = 30
    canvas_padding: float = 50
    # Canvas size used when there are no tables at all
    default_canvas_width: float = 800
    default_canvas_height: float = 600
    # Grid auto-placement
    grid_columns: int = 3
    grid_spacing_x: float = 320
    grid_spacing_y: float = 250


class ViewportConfig(BaseModel):
    """Zoom bounds and step for the viewport controller."""
    model_config = ConfigDict(frozen=True)

    min_zoom: float = 0.5
    max_zoom: float = 2.0
    zoom_step: float = 0.1
    initial_zoom: float = 1.0


DEFAULT_LAYOUT = LayoutConfig()
DEFAULT_VIEWPORT = ViewportConfig()

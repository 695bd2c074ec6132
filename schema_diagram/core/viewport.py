"""
Viewport state and pan/zoom interaction.

ViewportState is an immutable value; the module-level transition functions
return a new state for each gesture. ViewportController wraps them with the
transient panning flag so a UI layer only has to forward pointer events.

The visual transform is translate-then-scale: panning distance does not
depend on the zoom level.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_VIEWPORT, ViewportConfig

# Keeps repeated 0.1 steps from accumulating float drift
ZOOM_PRECISION = 4


class Offset(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0


class ViewportState(BaseModel):
    """Zoom factor and pan offset applied to the canvas."""
    model_config = ConfigDict(frozen=True)

    zoom: float = 1.0
    offset: Offset = Field(default_factory=Offset)

    @property
    def zoom_percent(self) -> int:
        return round(self.zoom * 100)

    def css_transform(self) -> str:
        return f"translate({_fmt(self.offset.x)}px, {_fmt(self.offset.y)}px) scale({_fmt(self.zoom)})"

    def to_screen(self, point: tuple[float, float]) -> tuple[float, float]:
        """Map a canvas point to screen space."""
        x, y = point
        return (x * self.zoom + self.offset.x, y * self.zoom + self.offset.y)

    def to_canvas(self, point: tuple[float, float]) -> tuple[float, float]:
        """Map a screen point back to canvas space."""
        x, y = point
        return ((x - self.offset.x) / self.zoom, (y - self.offset.y) / self.zoom)

    def to_dict(self) -> dict:
        return {
            "zoom": self.zoom,
            "offset": {"x": self.offset.x, "y": self.offset.y},
            "zoom_percent": self.zoom_percent,
            "transform": self.css_transform(),
        }


def _fmt(value: float) -> str:
    """Format a number without a trailing '.0' for whole values."""
    return str(int(value)) if float(value).is_integer() else str(value)


def initial_state(config: ViewportConfig = DEFAULT_VIEWPORT) -> ViewportState:
    return ViewportState(zoom=config.initial_zoom)


def clamp_zoom(zoom: float, config: ViewportConfig = DEFAULT_VIEWPORT) -> float:
    return min(max(round(zoom, ZOOM_PRECISION), config.min_zoom), config.max_zoom)


def zoom_in(state: ViewportState, config: ViewportConfig = DEFAULT_VIEWPORT) -> ViewportState:
    return state.model_copy(update={"zoom": clamp_zoom(state.zoom + config.zoom_step, config)})


def zoom_out(state: ViewportState, config: ViewportConfig = DEFAULT_VIEWPORT) -> ViewportState:
    return state.model_copy(update={"zoom": clamp_zoom(state.zoom - config.zoom_step, config)})


def set_zoom(state: ViewportState, zoom: float, config: ViewportConfig = DEFAULT_VIEWPORT) -> ViewportState:
    """Jump to an arbitrary zoom; out-of-range values are clamped."""
    return state.model_copy(update={"zoom": clamp_zoom(zoom, config)})


def reset(state: ViewportState, config: ViewportConfig = DEFAULT_VIEWPORT) -> ViewportState:
    return initial_state(config)


def pan_anchor(state: ViewportState, pointer: tuple[float, float]) -> tuple[float, float]:
    """Pointer position minus the current offset."""
    return (pointer[0] - state.offset.x, pointer[1] - state.offset.y)


def pan_to(
    state: ViewportState,
    anchor: tuple[float, float],
    pointer: tuple[float, float]
) -> ViewportState:
    """Offset becomes pointer minus anchor. Unbounded in both directions."""
    return state.model_copy(update={
        "offset": Offset(x=pointer[0] - anchor[0], y=pointer[1] - anchor[1])
    })


class PanMode(str, Enum):
    IDLE = "idle"
    PANNING = "panning"


class ViewportController:
    """
    Owns the viewport state for one mounted diagram.

    States: IDLE and PANNING. pointer_down enters PANNING, pointer_up and
    pointer_leave return to IDLE, and pointer_move only has an effect while
    PANNING.
    """

    def __init__(self, config: ViewportConfig = DEFAULT_VIEWPORT):
        self._config = config
        self._state = initial_state(config)
        self._mode = PanMode.IDLE
        self._anchor: Optional[tuple[float, float]] = None

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def mode(self) -> PanMode:
        return self._mode

    @property
    def is_panning(self) -> bool:
        return self._mode is PanMode.PANNING

    def zoom_in(self) -> ViewportState:
        self._state = zoom_in(self._state, self._config)
        return self._state

    def zoom_out(self) -> ViewportState:
        self._state = zoom_out(self._state, self._config)
        return self._state

    def set_zoom(self, zoom: float) -> ViewportState:
        self._state = set_zoom(self._state, zoom, self._config)
        return self._state

    def reset(self) -> ViewportState:
        self._state = reset(self._state, self._config)
        return self._state

    def pointer_down(self, x: float, y: float) -> None:
        self._anchor = pan_anchor(self._state, (x, y))
        self._mode = PanMode.PANNING

    def pointer_move(self, x: float, y: float) -> bool:
        """Returns True if the offset changed."""
        if self._mode is not PanMode.PANNING or self._anchor is None:
            return False
        new_state = pan_to(self._state, self._anchor, (x, y))
        changed = new_state != self._state
        self._state = new_state
        return changed

    def pointer_up(self) -> None:
        self._mode = PanMode.IDLE
        self._anchor = None

    # Leaving the canvas ends the pan the same way releasing does
    pointer_leave = pointer_up

    def to_dict(self) -> dict:
        return {**self._state.to_dict(), "mode": self._mode.value}

"""
SVG export of a rendered Scene.

The document mirrors the browser layout: the canvas group carries the
viewport transform, table cards are stacked above the connectors, and each
connector is a 1px bar rotated about its start point.
"""

from .config import DEFAULT_LAYOUT, LayoutConfig
from .renderer import FOREIGN_KEY_BADGE, PRIMARY_KEY_BADGE, Scene, TableBox

BACKGROUND = "#f3f6fb"
CARD_FILL = "#ffffff"
CARD_STROKE = "#556b8a"
SELECTED_STROKE = "#1f5a95"
HEADER_FILL = "#dae7f8"
CONNECTOR_FILL = "#1f5a95"
BADGE_COLORS = {PRIMARY_KEY_BADGE: "#b7791f", FOREIGN_KEY_BADGE: "#2b6cb0"}

LABEL_FONT = "Segoe UI, Arial, sans-serif"
MONO_FONT = "Consolas, Courier New, monospace"


def _xml_escape(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _table_card(box: TableBox, config: LayoutConfig) -> list[str]:
    stroke = SELECTED_STROKE if box.selected else CARD_STROKE
    stroke_width = 3 if box.selected else 1.5
    css_class = "table-box selected" if box.selected else "table-box"
    x, y = box.x, box.y

    lines = [
        f'    <g class="{css_class}" data-table="{_xml_escape(box.name)}">',
        f'      <rect x="{_num(x)}" y="{_num(y)}" width="{_num(box.width)}" height="{_num(box.height)}" '
        f'fill="{CARD_FILL}" stroke="{stroke}" stroke-width="{stroke_width}" rx="4" />',
        f'      <rect x="{_num(x)}" y="{_num(y)}" width="{_num(box.width)}" height="{_num(config.header_height)}" '
        f'fill="{HEADER_FILL}" stroke="{stroke}" stroke-width="{stroke_width}" rx="4" />',
        f'      <text x="{_num(x + 8)}" y="{_num(y + config.header_height / 2 + 5)}" font-family="{LABEL_FONT}" '
        f'font-size="13" font-weight="bold" fill="#1a2a44">{box.icon} {_xml_escape(box.name)}</text>',
    ]

    row_y = y + config.header_height
    for row in box.rows:
        baseline = row_y + config.row_height / 2 + 4
        badge_x = x + 6
        for badge in row.badges:
            lines.append(
                f'      <text x="{_num(badge_x)}" y="{_num(baseline)}" font-family="{LABEL_FONT}" '
                f'font-size="9" font-weight="bold" fill="{BADGE_COLORS[badge]}">{badge}</text>'
            )
            badge_x += 18
        lines.append(
            f'      <text x="{_num(x + 44)}" y="{_num(baseline)}" font-family="{MONO_FONT}" '
            f'font-size="11" fill="#27374d">{_xml_escape(row.name)}</text>'
        )
        lines.append(
            f'      <text x="{_num(x + box.width - 6)}" y="{_num(baseline)}" font-family="{MONO_FONT}" '
            f'font-size="10" fill="#6b7a90" text-anchor="end">{_xml_escape(row.type_label)}</text>'
        )
        row_y += config.row_height

    lines.append("    </g>")
    return lines


def scene_to_svg(scene: Scene, config: LayoutConfig = DEFAULT_LAYOUT, legend: bool = True) -> str:
    """Render a scene as a standalone SVG document."""
    width, height = _num(scene.width), _num(scene.height)
    vp = scene.viewport

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
    )
    lines.append(f'  <rect x="0" y="0" width="{width}" height="{height}" fill="{BACKGROUND}" />')
    # SVG applies the listed transforms left to right: translate, then scale
    lines.append(
        f'  <g class="schema-canvas" transform="translate({_num(vp.offset.x)} {_num(vp.offset.y)}) scale({_num(vp.zoom)})">'
    )

    for connector in scene.connectors:
        sx, sy = connector.start
        lines.append(
            f'    <rect class="relationship-line" data-relationship="{_xml_escape(connector.id)}" '
            f'x="{_num(sx)}" y="{_num(sy)}" width="{_num(connector.length)}" height="1" '
            f'fill="{CONNECTOR_FILL}" transform="rotate({_num(connector.angle)} {_num(sx)} {_num(sy)})" />'
        )

    for box in scene.tables:
        lines.extend(_table_card(box, config))

    lines.append("  </g>")

    if legend:
        lines.append('  <g class="schema-legend">')
        lines.append(
            f'    <text x="12" y="{_num(scene.height - 28)}" font-family="{LABEL_FONT}" font-size="11" '
            f'fill="{BADGE_COLORS[PRIMARY_KEY_BADGE]}">{PRIMARY_KEY_BADGE} Primary key</text>'
        )
        lines.append(
            f'    <text x="12" y="{_num(scene.height - 12)}" font-family="{LABEL_FONT}" font-size="11" '
            f'fill="{BADGE_COLORS[FOREIGN_KEY_BADGE]}">{FOREIGN_KEY_BADGE} Foreign key</text>'
        )
        lines.append("  </g>")

    lines.append("</svg>")
    return "\n".join(lines) + "\n"

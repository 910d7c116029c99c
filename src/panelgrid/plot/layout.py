# src/panelgrid/plot/layout.py
"""Debug drawing of a subplot partition: canvas, panels, dividers, tags and heading."""
from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import List, Tuple

import matplotlib.pyplot as plt
from matplotlib.colors import is_color_like
from matplotlib.patches import Rectangle

from panelgrid.layout.records import FigureLayout, PanelRecord, Tag
from panelgrid.layout.tags import parse_justify
from panelgrid.plot._export import savefig
from panelgrid.units import POINTS_PER_INCH, to_inch

__all__ = ["draw_layout", "render_layout", "pen_style"]

logger = logging.getLogger(__name__)

_GRAY_RE = re.compile(r"^gr[ae]y(\d{1,3})$")

# named pen widths, points
_PEN_WIDTHS = {
    "faint": 0.0,
    "default": 0.25,
    "thinnest": 0.25,
    "thinner": 0.5,
    "thin": 1.0,
    "thick": 1.5,
    "thicker": 2.0,
    "thickest": 4.0,
    "fat": 12.0,
}

_HALIGN = {"L": "left", "C": "center", "R": "right"}
_VALIGN = {"B": "bottom", "M": "center", "T": "top"}


def _color(name: str, default: str) -> str:
    m = _GRAY_RE.match(name)
    if m:
        return str(min(int(m.group(1)), 100) / 100.0)
    if is_color_like(name):
        return name
    logger.debug("unknown color '%s', using %s", name, default)
    return default


def pen_style(pen: str, default_color: str = "black") -> Tuple[float, str]:
    """Convert a '<width>[,<color>]' pen to (linewidth in points, matplotlib color)."""
    width, _, color = pen.partition(",")
    linewidth = 1.0
    if width in _PEN_WIDTHS:
        linewidth = _PEN_WIDTHS[width]
    elif width:
        linewidth = to_inch(width, "p") * POINTS_PER_INCH
    return linewidth, _color(color, default_color) if color else default_color


def _tag_anchor(tag: Tag, x0: float, y0: float, w: float, h: float) -> Tuple[float, float, str, str]:
    ph, pv = parse_justify(tag.placement)
    jh, jv = parse_justify(tag.justify)
    x = {"L": x0, "C": x0 + 0.5 * w, "R": x0 + w}[ph]
    y = {"B": y0, "M": y0 + 0.5 * h, "T": y0 + h}[pv]
    # offsets move the tag away from the reference point, inward for inside placement
    x += {"L": tag.offset[0], "C": 0.0, "R": -tag.offset[0]}[jh]
    y += {"B": tag.offset[1], "M": 0.0, "T": -tag.offset[1]}[jv]
    return x, y, _HALIGN[jh], _VALIGN[jv]


def render_layout(layout: FigureLayout, panels: List[PanelRecord]) -> plt.Figure:
    """Draw the partition to scale (1 data unit = 1 inch)."""
    ox, oy = layout.origin
    width, height = layout.dimension
    cx, cy = layout.canvas.clearance
    page_w = width + ox + 2.0 * cx
    page_h = height + oy + 2.0 * cy
    if layout.heading is not None:
        page_h = max(page_h, oy + layout.heading.y + 0.5)

    fig = plt.figure(figsize=(page_w, page_h))
    ax = fig.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.set_xlim(0.0, page_w)
    ax.set_ylim(0.0, page_h)
    ax.set_axis_off()
    ox += cx
    oy += cy

    canvas = layout.canvas
    if canvas.fill != "-" or canvas.pen != "-":
        lw, edge = pen_style(canvas.pen) if canvas.pen != "-" else (0.0, "none")
        ax.add_patch(
            Rectangle(
                (ox - cx, oy - cy),
                width + 2.0 * cx,
                height + 2.0 * cy,
                facecolor=_color(canvas.fill, "white") if canvas.fill != "-" else "none",
                edgecolor=edge,
                linewidth=lw,
                zorder=0,
            )
        )

    for p in panels:
        x0, y0 = ox + p.origin[0], oy + p.origin[1]
        w, h = p.size
        ax.add_patch(
            Rectangle((x0, y0), w, h, facecolor="0.92", edgecolor="tab:red", linestyle="--", linewidth=0.8, zorder=1)
        )
        ax.text(x0 + 0.5 * w, y0 + 0.5 * h, f"{p.index}\n({p.row},{p.column})", ha="center", va="center", fontsize=9)
        if p.tag is not None:
            tx, ty, ha, va = _tag_anchor(p.tag, x0, y0, w, h)
            ax.text(tx, ty, p.tag.text, ha=ha, va=va, fontsize=10, fontweight="bold", zorder=3)

    if canvas.divider_pen != "-":
        lw, color = pen_style(canvas.divider_pen)
        xs, ys = layout.dividers
        for x in xs:
            ax.plot([ox + x, ox + x], [oy, oy + height], color=color, linewidth=lw, zorder=2)
        for y in ys:
            ax.plot([ox, ox + width], [oy + y, oy + y], color=color, linewidth=lw, zorder=2)

    if layout.heading is not None:
        ax.text(
            ox + layout.heading.x, oy + layout.heading.y, layout.heading.text,
            ha="center", va="bottom", fontsize=14,
        )
    return fig


def draw_layout(
    layout: FigureLayout,
    panels: List[PanelRecord],
    path: str | Path,
    *,
    dpi: int = 150,
) -> Path:
    """Render the partition and save it to `path`. Returns the written file."""
    fig = render_layout(layout, panels)
    try:
        written = savefig(fig, path, dpi=dpi)
    finally:
        plt.close(fig)
    logger.debug("debug layout written to %s", written[0])
    return written[0]

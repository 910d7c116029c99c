# src/panelgrid/layout/records.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from panelgrid.layout.frame import FrameSides
from panelgrid.layout.tags import Numbering

__all__ = ["Heading", "Canvas", "Tag", "FigureLayout", "PanelRecord"]

Pair = Tuple[float, float]
Quad = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Heading:
    """Figure heading text anchored at its bottom centre (inches, figure frame)."""
    text: str
    x: float
    y: float


@dataclass(frozen=True)
class Canvas:
    """
    Background of the whole subplot block (-F+c/+g/+p/+w).

    Attributes:
        clearance: (dx, dy) extension of the canvas beyond the figure area
        fill: canvas fill ("-" = none)
        pen: canvas outline pen ("-" = none)
        divider_pen: pen for lines between interior rows/columns ("-" = none)
    """
    clearance: Pair = (0.0, 0.0)
    fill: str = "-"
    pen: str = "-"
    divider_pen: str = "-"


@dataclass(frozen=True)
class Tag:
    text: str
    offset: Pair
    clearance: Pair
    placement: str = "TL"
    justify: str = "TL"
    fill: str = "-"
    pen: str = "-"
    shade_offset: Pair = (0.0, 0.0)
    shade: str = "-"


@dataclass(frozen=True)
class FigureLayout:
    """
    Figure-level geometry of one subplot session. Lengths are in inches.

    Attributes:
        rows, columns: grid shape
        origin: (x, y) of the block on the page
        dimension: (width, height) of the full plottable area
        column_widths, row_heights: panel sizes
        margins: (west, east, south, north) gap each panel contributes to its neighbours
        numbering: tag numbering and cursor order
        heading: optional figure heading
        parallel: y annotations parallel to the axis
        inside: frame type is "inside"
        gaps: optional (w, e, s, n) clearances inside every panel
        direction: optional (+/-1, +/-1) Cartesian axis direction signs
        frame_axes: resolved frame-axes list ("" when given explicitly)
        canvas: background settings
        dividers: (x positions between columns, y positions between rows)
        debug: draw the partition at `end`
        tagging: automatic tags were requested
        command: echo of the begin command
    """
    rows: int
    columns: int
    origin: Pair
    dimension: Pair
    column_widths: Tuple[float, ...]
    row_heights: Tuple[float, ...]
    margins: Quad
    numbering: Numbering = Numbering.ROW
    heading: Optional[Heading] = None
    parallel: bool = False
    inside: bool = False
    gaps: Optional[Quad] = None
    direction: Optional[Tuple[int, int]] = None
    frame_axes: str = ""
    canvas: Canvas = field(default_factory=Canvas)
    dividers: Tuple[Tuple[float, ...], Tuple[float, ...]] = ((), ())
    debug: bool = False
    tagging: bool = False
    command: str = ""

    @property
    def n_panels(self) -> int:
        return self.rows * self.columns

    @property
    def region(self) -> str:
        """Page region covered by the subplot block, as w/e/s/n."""
        return f"0/{self.dimension[0] + self.origin[0]:g}/0/{self.dimension[1] + self.origin[1]:g}"


@dataclass(frozen=True)
class PanelRecord:
    """
    One cell of the grid.

    `origin` is the lower-left corner relative to `FigureLayout.origin`.
    Labels are empty except on the panels that carry the shared label.
    """
    index: int
    row: int
    column: int
    rows: int
    columns: int
    origin: Pair
    size: Pair
    tag: Optional[Tag] = None
    frame: FrameSides = field(default_factory=lambda: FrameSides(no_frame=True))
    x_label: str = ""
    y_label: str = ""
    x_annotation: str = ""
    y_annotation: str = ""

# src/panelgrid/layout/grid.py
"""
Panel grid builder.

Composes the axis-sharing planner and the dimension resolver into one
`PanelRecord` per cell. Rows are walked top to bottom from y = height and
columns left to right from x = 0; each interior boundary consumes, in order,
the margin, title, facing decoration, panel, decoration and margin exactly as
planned, so the walk ends at y = 0 and x = width.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from panelgrid.config import StyleSettings
from panelgrid.errors import ConfigError
from panelgrid.layout.dimensions import FigureDims, PanelDims, ResolvedDimensions, resolve_dimensions
from panelgrid.layout.frame import FrameSides
from panelgrid.layout.records import Canvas, FigureLayout, Heading, PanelRecord, Tag
from panelgrid.layout.sharing import AxesPlan, AxisShare, FrameOverride, Placement, TitleMode, plan_axes
from panelgrid.layout.tags import Numbering, TagSpec
from panelgrid.units import POINTS_PER_INCH

__all__ = ["LayoutRequest", "build_grid", "default_margins"]

logger = logging.getLogger(__name__)

Quad = Tuple[float, float, float, float]

# Tag offset and clearance as fractions of the tag font size
TAG_OFFSET_FRACTION = 0.20
TAG_CLEARANCE_FRACTION = 0.15


@dataclass(frozen=True)
class LayoutRequest:
    """
    Structured form of a `begin` invocation.

    Attributes:
        rows, columns: grid shape
        dims: figure or panel dimensions (-F)
        margins: (w, e, s, n) panel margins (-M); None = half the annotation font size
        tags: automatic tag settings (-A); None = no tags
        x_share: x-axis settings; active when columns share an x-range (-Sc)
        y_share: y-axis settings; active when rows share a y-range (-Sr)
        title_mode: panel title allowance (-S..+t)
        frame: explicit frame sides (-B<frame>)
        no_frame: no frames at all (-B+n)
        compute_only: lay out panels without any frames (-D)
        heading: figure heading text (-T)
        gaps: (w, e, s, n) clearances inside panels (-C)
        canvas: background settings (-F+c/+g/+p/+w)
        debug: draw the partition at `end` (-F+d)
        origin: (x, y) of the block on the page (-X/-Y)
        direction: Cartesian axis direction signs, if known
        command: echo of the command line
    """
    rows: int
    columns: int
    dims: Union[FigureDims, PanelDims]
    margins: Optional[Quad] = None
    tags: Optional[TagSpec] = None
    x_share: AxisShare = field(default_factory=AxisShare)
    y_share: AxisShare = field(default_factory=AxisShare)
    title_mode: TitleMode = TitleMode.NONE
    frame: Optional[FrameOverride] = None
    no_frame: bool = False
    compute_only: bool = False
    heading: Optional[str] = None
    gaps: Optional[Quad] = None
    canvas: Canvas = field(default_factory=Canvas)
    debug: bool = False
    origin: Tuple[float, float] = (0.0, 0.0)
    direction: Optional[Tuple[int, int]] = None
    command: str = ""

    def validate(self) -> None:
        if self.rows < 1 or self.columns < 1:
            raise ConfigError(f"need at least one row and one column; got {self.rows}x{self.columns}")
        if self.margins is not None and len(self.margins) != 4:
            raise ConfigError("margins must have four values (w, e, s, n)", "-M")
        if self.margins is not None and any(m < 0.0 for m in self.margins):
            raise ConfigError("margins cannot be negative", "-M")
        if self.gaps is not None and len(self.gaps) != 4:
            raise ConfigError("gaps must have four values (w, e, s, n)", "-C")
        if self.x_share.active and not self.x_share.placement:
            raise ConfigError("shared x-axis must be annotated at the top, bottom or both", "-Sc")
        if self.y_share.active and not self.y_share.placement:
            raise ConfigError("shared y-axis must be annotated at the left, right or both", "-Sr")


def default_margins(style: StyleSettings) -> Quad:
    m = 0.5 * style.font_annot / POINTS_PER_INCH
    return (m, m, m, m)


def _make_tag(spec: TagSpec, style: StyleSettings, row: int, col: int, rows: int, columns: int) -> Tag:
    tag_size = style.font_tag / POINTS_PER_INCH
    offset = spec.offset or (TAG_OFFSET_FRACTION * tag_size,) * 2
    clearance = spec.clearance or (TAG_CLEARANCE_FRACTION * tag_size,) * 2
    return Tag(
        text=spec.text_for(row, col, rows, columns),
        offset=(float(offset[0]), float(offset[1])),
        clearance=(float(clearance[0]), float(clearance[1])),
        placement=spec.placement,
        justify=spec.justify,
        fill=spec.fill,
        pen=spec.pen,
        shade_offset=spec.shade_offset,
        shade=spec.shade,
    )


def _walk_rows(plan: AxesPlan, dims: ResolvedDimensions) -> Tuple[List[float], List[float]]:
    """Return (panel y0 per row, divider y per interior boundary)."""
    _, _, margin_s, margin_n = plan.margins
    last = len(dims.row_heights) - 1
    y = dims.height
    py: List[float] = []
    cy: List[float] = []
    for row, h in enumerate(dims.row_heights):
        if row:
            y -= margin_n + plan.title_space(row) + plan.north_space(row)
        y -= h
        py.append(y)
        if row < last:
            y -= plan.south_space(row) + margin_s
            cy.append(y)
    logger.debug("walk ended at y = %g", y)
    return py, cy


def _walk_columns(plan: AxesPlan, dims: ResolvedDimensions) -> Tuple[List[float], List[float]]:
    """Return (panel x0 per column, divider x per interior boundary)."""
    margin_w, margin_e, _, _ = plan.margins
    last = len(dims.column_widths) - 1
    x = 0.0
    px: List[float] = []
    cx: List[float] = []
    for col, w in enumerate(dims.column_widths):
        if col:
            x += margin_w + plan.west_space(col)
        px.append(x)
        x += w
        if col < last:
            x += plan.east_space(col) + margin_e
            cx.append(x)
    logger.debug("walk ended at x = %g", x)
    return px, cx


def build_grid(
    request: LayoutRequest,
    style: StyleSettings,
    aspect_ratio: Optional[Callable[[], float]] = None,
) -> Tuple[FigureLayout, List[PanelRecord]]:
    """
    Lay out the grid described by `request`.

    Returns the figure layout and its panels in row-major order.

    Raises:
        ConfigError: invalid request.
        LayoutError: the geometry cannot be realized.
    """
    request.validate()
    rows, columns = request.rows, request.columns
    margins = request.margins if request.margins is not None else default_margins(style)
    no_frame = request.no_frame or request.compute_only

    plan = plan_axes(
        rows,
        columns,
        style=style,
        margins=margins,
        x_share=request.x_share,
        y_share=request.y_share,
        override=request.frame,
        title_mode=request.title_mode,
        no_frame=no_frame,
    )
    dims = resolve_dimensions(request.dims, plan.fluff, rows, columns, aspect_ratio)
    py, cy = _walk_rows(plan, dims)
    px, cx = _walk_columns(plan, dims)

    extra = request.frame.extra if request.frame is not None else ""
    x_annot = request.x_share.annotation_spec()
    y_annot = request.y_share.annotation_spec()
    panels: List[PanelRecord] = []
    for row in range(rows):
        row_plan = plan.rows[row]
        for col in range(columns):
            col_plan = plan.columns[col]
            tag = None
            if request.tags is not None:
                tag = _make_tag(request.tags, style, row, col, rows, columns)
            if no_frame:
                frame = FrameSides(no_frame=True)
                x_label = y_label = ""
                xa = ya = ""
            else:
                frame = FrameSides(
                    west=col_plan.west,
                    east=col_plan.east,
                    south=row_plan.south,
                    north=row_plan.north,
                    extra=extra,
                )
                if not frame.sides_code() and not frame.extra:
                    frame = FrameSides(no_frame=True)
                x_label = (request.x_share.label or "") if row_plan.label_sides != Placement.NONE else ""
                y_label = (request.y_share.label or "") if col_plan.label_sides != Placement.NONE else ""
                xa, ya = x_annot, y_annot
            panels.append(
                PanelRecord(
                    index=row * columns + col,
                    row=row,
                    column=col,
                    rows=rows,
                    columns=columns,
                    origin=(px[col], py[row]),
                    size=(dims.column_widths[col], dims.row_heights[row]),
                    tag=tag,
                    frame=frame,
                    x_label=x_label,
                    y_label=y_label,
                    x_annotation=xa,
                    y_annotation=ya,
                )
            )

    heading = None
    if request.heading:
        heading = Heading(
            text=request.heading,
            x=0.5 * dims.width,
            y=dims.height + plan.heading_offset + plan.margins[3],
        )

    layout = FigureLayout(
        rows=rows,
        columns=columns,
        origin=(float(request.origin[0]), float(request.origin[1])),
        dimension=(dims.width, dims.height),
        column_widths=dims.column_widths,
        row_heights=dims.row_heights,
        margins=plan.margins,
        numbering=request.tags.numbering if request.tags is not None else Numbering.ROW,
        heading=heading,
        parallel=request.y_share.parallel,
        inside=style.inside,
        gaps=request.gaps,
        direction=request.direction,
        frame_axes=plan.frame_axes or "",
        canvas=request.canvas,
        dividers=(tuple(cx), tuple(cy)),
        debug=request.debug,
        tagging=request.tags is not None,
        command=request.command,
    )
    logger.debug("built %d panels in a %g x %g inch figure", len(panels), dims.width, dims.height)
    return layout, panels

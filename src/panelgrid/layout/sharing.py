# src/panelgrid/layout/sharing.py
"""
Axis-sharing planner.

Decides, for every row boundary (north/south sides) and every column boundary
(west/east sides), whether the side is annotated, ticked, drawn as a plain line
or left alone, and sums the room those decisions take between panels.

Column sharing (x-axis, -Sc) governs the S/N sides of each row: the panels of a
column share one x-range so only the top and/or bottom row are annotated and the
interior rows get ticks only. Row sharing (y-axis, -Sr) does the same for the
W/E sides of each column.

Only interior boundaries consume room: the outer sides of the outer panels draw
into the page margins, not into the figure area.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Optional, Sequence, Tuple

from panelgrid.config import StyleSettings
from panelgrid.layout.frame import SideMode, X_SIDE_TOKENS, Y_SIDE_TOKENS

__all__ = [
    "Placement",
    "TitleMode",
    "AxisShare",
    "FrameOverride",
    "Metrics",
    "RowPlan",
    "ColumnPlan",
    "AxesPlan",
    "compute_metrics",
    "requested_sides",
    "plan_axes",
]

logger = logging.getLogger(__name__)


class Placement(IntFlag):
    """Which extreme side(s) of a shared axis carry annotations."""
    NONE = 0
    MIN = 1   # bottom row (S) or left column (W)
    MAX = 2   # top row (N) or right column (E)
    BOTH = 3


class TitleMode(Enum):
    NONE = "none"
    COLUMN = "column"   # one title per column above the top row
    ALL = "all"         # every panel has a title


@dataclass(frozen=True)
class AxisShare:
    """
    Settings for one axis (x: S/N sides, y: W/E sides).

    Attributes:
        active: panels along this axis share a range (-Sc for x, -Sr for y)
        placement: outer side(s) annotated when active
        has_label: reserve room for an axis label next to annotated sides
        label: fixed label text placed on the annotated boundary
        annotation: -B style interval/format string [af]
        prefix: optional annotation prefix
        unit: optional annotation unit
        parallel: y annotations parallel to the axis
    """
    active: bool = False
    placement: Placement = Placement.NONE
    has_label: bool = False
    label: Optional[str] = None
    annotation: str = "af"
    prefix: Optional[str] = None
    unit: Optional[str] = None
    parallel: bool = False

    def annotation_spec(self) -> str:
        spec = self.annotation
        if self.prefix:
            spec += "+p" + self.prefix
        if self.unit:
            spec += "+u" + self.unit
        return spec


@dataclass(frozen=True)
class FrameOverride:
    """Explicit frame sides (-B<frame>) that override the configured frame axes."""
    x_tokens: str = ""
    y_tokens: str = ""
    extra: str = ""

    @classmethod
    def from_axes(cls, axes: str, extra: str = "") -> FrameOverride:
        return cls(
            x_tokens="".join(ch for ch in X_SIDE_TOKENS if ch in axes),
            y_tokens="".join(ch for ch in Y_SIDE_TOKENS if ch in axes),
            extra=extra,
        )


@dataclass(frozen=True)
class Metrics:
    """Heights (inches) of the decorations that may sit between panels."""
    tick: float
    annot: float
    label: float
    title: float
    heading_offset: float


def compute_metrics(style: StyleSettings, *, no_frame: bool = False) -> Metrics:
    # Inside frames put ticks and annotations within the panel
    scale = 0.0 if style.inside else 1.0
    tick = scale * max(0.0, style.tick_length)
    annot = scale * style.letter_height(style.font_annot) + max(0.0, style.annot_offset)
    label = scale * style.letter_height(style.font_label) + max(0.0, style.label_offset)
    title = style.letter_height(style.font_title) + style.title_offset
    if no_frame:
        tick = annot = label = 0.0
    return Metrics(tick=tick, annot=annot, label=label, title=title, heading_offset=style.heading_offset)


def _pick(axes: str, candidates: str) -> str:
    for ch in candidates:
        if ch in axes:
            return ch
    return ""


def requested_sides(
    style: StyleSettings,
    x_share: AxisShare,
    y_share: AxisShare,
    override: Optional[FrameOverride] = None,
) -> Tuple[str, str, Optional[str]]:
    """
    Return (x_axes, y_axes, writeback): the frame tokens requested for the
    S/N sides and W/E sides of every panel, plus the resolved frame-axes list
    when the style asked for "auto" (None otherwise).
    """
    if override is not None:
        x_axes, y_axes = override.x_tokens, override.y_tokens
        # Shared axes control annotation themselves; the override only says which sides exist
        if x_axes and x_share.active:
            x_axes = x_axes.lower()
        if y_axes and y_share.active:
            y_axes = y_axes.lower()
        return x_axes, y_axes, None

    frame_axes = style.resolved_frame_axes()
    if x_share.active:
        x_axes = "SN"
    else:
        x_axes = _pick(frame_axes, "Ssb") + _pick(frame_axes, "Nnt")
    if y_share.active:
        y_axes = "WE"
    else:
        y_axes = _pick(frame_axes, "Wwl") + _pick(frame_axes, "Eer")
    writeback = x_axes + y_axes + "Z" if style.frame_axes == "auto" else None
    return x_axes, y_axes, writeback


@dataclass(frozen=True)
class RowPlan:
    north: SideMode
    south: SideMode
    label_sides: Placement
    title: bool


@dataclass(frozen=True)
class ColumnPlan:
    west: SideMode
    east: SideMode
    label_sides: Placement


def _side_mode(annotate: bool, axes: str, annot_token: str, tick_token: str, line_token: str) -> SideMode:
    if annotate:
        return SideMode.ANNOTATE
    if annot_token in axes or tick_token in axes:
        return SideMode.TICK
    if line_token in axes:
        return SideMode.LINE
    return SideMode.NONE


def _plan_rows(n_rows: int, share: AxisShare, axes: str, title_mode: TitleMode) -> Tuple[RowPlan, ...]:
    last = n_rows - 1
    plans = []
    for row in range(n_rows):
        if share.active:
            annot_n = row == 0 and bool(share.placement & Placement.MAX)
            annot_s = row == last and bool(share.placement & Placement.MIN)
        else:
            annot_n = "N" in axes
            annot_s = "S" in axes
        north = _side_mode(annot_n, axes, "N", "n", "t")
        south = _side_mode(annot_s, axes, "S", "s", "b")
        labels = Placement.NONE
        if share.has_label:
            if north is SideMode.ANNOTATE:
                labels |= Placement.MAX
            if south is SideMode.ANNOTATE:
                labels |= Placement.MIN
        title = title_mode is TitleMode.ALL or (title_mode is TitleMode.COLUMN and row == 0)
        plans.append(RowPlan(north=north, south=south, label_sides=labels, title=title))
    return tuple(plans)


def _plan_columns(n_cols: int, share: AxisShare, axes: str) -> Tuple[ColumnPlan, ...]:
    last = n_cols - 1
    plans = []
    for col in range(n_cols):
        if share.active:
            annot_w = col == 0 and bool(share.placement & Placement.MIN)
            annot_e = col == last and bool(share.placement & Placement.MAX)
        else:
            annot_w = "W" in axes
            annot_e = "E" in axes
        west = _side_mode(annot_w, axes, "W", "w", "l")
        east = _side_mode(annot_e, axes, "E", "e", "r")
        labels = Placement.NONE
        if share.has_label:
            if west is SideMode.ANNOTATE:
                labels |= Placement.MIN
            if east is SideMode.ANNOTATE:
                labels |= Placement.MAX
        plans.append(ColumnPlan(west=west, east=east, label_sides=labels))
    return tuple(plans)


@dataclass(frozen=True)
class AxesPlan:
    """
    Output of the planner: per-row and per-column side decisions plus the
    room they consume. All *_space methods return 0 for outer boundaries.
    """
    rows: Tuple[RowPlan, ...]
    columns: Tuple[ColumnPlan, ...]
    metrics: Metrics
    margins: Tuple[float, float, float, float]
    x_share: AxisShare
    y_share: AxisShare
    x_axes: str
    y_axes: str
    frame_axes: Optional[str]
    fluff: Tuple[float, float]
    heading_offset: float

    def _space(self, mode: SideMode, has_label: bool) -> float:
        m = self.metrics
        if mode is SideMode.ANNOTATE:
            return m.annot + m.tick + (m.label if has_label else 0.0)
        if mode is SideMode.TICK:
            return m.tick
        return 0.0

    def north_space(self, row: int) -> float:
        if row == 0:
            return 0.0
        return self._space(self.rows[row].north, self.x_share.has_label)

    def south_space(self, row: int) -> float:
        if row == len(self.rows) - 1:
            return 0.0
        return self._space(self.rows[row].south, self.x_share.has_label)

    def title_space(self, row: int) -> float:
        if row == 0 or not self.rows[row].title:
            return 0.0
        return self.metrics.title

    def west_space(self, col: int) -> float:
        if col == 0:
            return 0.0
        return self._space(self.columns[col].west, self.y_share.has_label)

    def east_space(self, col: int) -> float:
        if col == len(self.columns) - 1:
            return 0.0
        return self._space(self.columns[col].east, self.y_share.has_label)


def plan_axes(
    n_rows: int,
    n_cols: int,
    *,
    style: StyleSettings,
    margins: Sequence[float],
    x_share: AxisShare = AxisShare(),
    y_share: AxisShare = AxisShare(),
    override: Optional[FrameOverride] = None,
    title_mode: TitleMode = TitleMode.NONE,
    no_frame: bool = False,
) -> AxesPlan:
    """
    Plan frame sides for an n_rows x n_cols grid and compute the horizontal and
    vertical fluff (room taken by interior margins, ticks, annotations, labels
    and titles). Pure function of its inputs.
    """
    metrics = compute_metrics(style, no_frame=no_frame)
    x_axes, y_axes, writeback = requested_sides(style, x_share, y_share, override)
    margin_w, margin_e, margin_s, margin_n = (float(m) for m in margins)
    logger.debug(
        "metrics: tick=%g annot=%g label=%g title=%g", metrics.tick, metrics.annot, metrics.label, metrics.title
    )
    logger.debug("requested sides: x=%r y=%r", x_axes, y_axes)

    plan = AxesPlan(
        rows=_plan_rows(n_rows, x_share, x_axes, title_mode),
        columns=_plan_columns(n_cols, y_share, y_axes),
        metrics=metrics,
        margins=(margin_w, margin_e, margin_s, margin_n),
        x_share=x_share,
        y_share=y_share,
        x_axes=x_axes,
        y_axes=y_axes,
        frame_axes=writeback,
        fluff=(0.0, 0.0),
        heading_offset=0.0,
    )

    fluff_x = (n_cols - 1) * (margin_w + margin_e)
    fluff_y = (n_rows - 1) * (margin_s + margin_n)
    logger.debug("after interior margins: fluff = {%g, %g}", fluff_x, fluff_y)
    fluff_x += sum(plan.west_space(c) + plan.east_space(c) for c in range(n_cols))
    logger.debug("after column annotations/ticks/labels: fluff = {%g, %g}", fluff_x, fluff_y)
    fluff_y += sum(plan.north_space(r) + plan.south_space(r) for r in range(n_rows))
    logger.debug("after row annotations/ticks/labels: fluff = {%g, %g}", fluff_x, fluff_y)
    fluff_y += sum(plan.title_space(r) for r in range(n_rows))
    logger.debug("after panel titles: fluff = {%g, %g}", fluff_x, fluff_y)

    # Room above the top row: its north decorations plus any column titles
    top = plan._space(plan.rows[0].north, x_share.has_label) if n_rows else 0.0
    heading_offset = metrics.heading_offset + top
    if title_mode is not TitleMode.NONE:
        heading_offset += metrics.title

    return AxesPlan(
        rows=plan.rows,
        columns=plan.columns,
        metrics=metrics,
        margins=plan.margins,
        x_share=x_share,
        y_share=y_share,
        x_axes=x_axes,
        y_axes=y_axes,
        frame_axes=writeback,
        fluff=(fluff_x, fluff_y),
        heading_offset=heading_offset,
    )

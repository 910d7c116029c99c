# src/panelgrid/layout/__init__.py
"""Pure layout computation: dimensions, axis sharing, tags and the panel grid."""
from __future__ import annotations

from panelgrid.layout.dimensions import FigureDims, PanelDims, ResolvedDimensions, resolve_dimensions
from panelgrid.layout.frame import FrameSides, Side, SideMode
from panelgrid.layout.grid import LayoutRequest, build_grid, default_margins
from panelgrid.layout.records import Canvas, FigureLayout, Heading, PanelRecord, Tag
from panelgrid.layout.sharing import (
    AxesPlan,
    AxisShare,
    FrameOverride,
    Placement,
    TitleMode,
    plan_axes,
)
from panelgrid.layout.tags import Numbering, TagMode, TagSpec, to_roman

__all__ = [
    "FigureDims",
    "PanelDims",
    "ResolvedDimensions",
    "resolve_dimensions",
    "FrameSides",
    "Side",
    "SideMode",
    "LayoutRequest",
    "build_grid",
    "default_margins",
    "Canvas",
    "FigureLayout",
    "Heading",
    "PanelRecord",
    "Tag",
    "AxesPlan",
    "AxisShare",
    "FrameOverride",
    "Placement",
    "TitleMode",
    "plan_axes",
    "Numbering",
    "TagMode",
    "TagSpec",
    "to_roman",
]

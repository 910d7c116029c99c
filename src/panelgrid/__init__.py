# src/panelgrid/__init__.py
from __future__ import annotations
import logging

from .errors import (
    PanelgridError, ConfigError, LayoutError, NoMorePanelsError, SessionNotFoundError, StateIOError,
)
from .config import StyleSettings, PanelgridConfig, load_config
from .layout import (
    AxisShare, Canvas, FigureDims, FigureLayout, FrameOverride, FrameSides, LayoutRequest,
    Numbering, PanelDims, PanelRecord, Placement, SideMode, Tag, TagMode, TagSpec, TitleMode,
    build_grid,
)
from .store import LayoutStore
from .cursor import CursorState, PanelCursor
from .session import Subplot, BeginResult, PanelSelection, EndResult

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "Subplot", "build_grid", "LayoutRequest",
    # Results
    "BeginResult", "PanelSelection", "EndResult",
    # Layout records
    "FigureLayout", "PanelRecord", "Tag", "Canvas", "FrameSides", "SideMode",
    # Request pieces
    "FigureDims", "PanelDims", "AxisShare", "Placement", "FrameOverride", "TagSpec", "TagMode",
    "TitleMode", "Numbering",
    # State
    "LayoutStore", "PanelCursor", "CursorState",
    # Configuration
    "StyleSettings", "PanelgridConfig", "load_config",
    # Errors
    "PanelgridError", "ConfigError", "LayoutError", "NoMorePanelsError",
    "SessionNotFoundError", "StateIOError",
]
